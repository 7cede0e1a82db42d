"""
ABI fragments of the contracts the SDK reads from and writes to.

Only the functions the SDK calls are listed. The L1 mint controller takes the
signed mint context as a tuple; the L2 controllers embed the resolver data in
the context and take an extra bytes argument carrying the mint source tag.
"""


def _fn(name: str, inputs: list[dict], outputs: list[dict], mutability: str) -> dict:
    return {
        "type": "function",
        "name": name,
        "inputs": inputs,
        "outputs": outputs,
        "stateMutability": mutability,
    }


def _arg(name: str, type_: str, components: list[dict] = None) -> dict:
    arg = {"name": name, "type": type_}
    if components is not None:
        arg["components"] = components
    return arg


ENS_REGISTRY_ABI = [
    _fn("owner", [_arg("node", "bytes32")], [_arg("", "address")], "view"),
]

L2_AVAILABILITY_ABI = [
    _fn(
        "isNodeAvailable",
        [_arg("label", "string"), _arg("node", "bytes32")],
        [_arg("", "bool")],
        "view",
    ),
]

L2_LEGACY_OWNER_ABI = [
    _fn(
        "subnodeOwner",
        [_arg("parentNode", "bytes32"), _arg("labelhash", "bytes32")],
        [_arg("", "address")],
        "view",
    ),
]

# Resolver setters, encoded into resolver data
SET_TEXT_SIGNATURE = "setText(bytes32,string,string)"
SET_ADDR_SIGNATURE = "setAddr(bytes32,address)"
SET_ADDRESS_SIGNATURE = "setAddress(bytes32,uint256,bytes)"
SET_CONTENTHASH_SIGNATURE = "setContenthash(bytes32,bytes)"

L1_MINT_CONTEXT = [
    _arg("subnameLabel", "string"),
    _arg("parentNode", "bytes32"),
    _arg("resolver", "address"),
    _arg("subnameOwner", "address"),
    _arg("fuses", "uint32"),
    _arg("mintPrice", "uint256"),
    _arg("mintFee", "uint256"),
    _arg("expiry", "uint64"),
    _arg("ttl", "uint64"),
]

L1_MINT_CONTROLLER_ABI = [
    _fn(
        "mint",
        [_arg("context", "tuple", L1_MINT_CONTEXT), _arg("signature", "bytes")],
        [],
        "payable",
    ),
    _fn(
        "mintWithData",
        [
            _arg("context", "tuple", L1_MINT_CONTEXT),
            _arg("signature", "bytes"),
            _arg("resolverData", "bytes[]"),
        ],
        [],
        "payable",
    ),
]

L2_MINT_CONTEXT = [
    _arg("label", "string"),
    _arg("parentNode", "bytes32"),
    _arg("resolverData", "bytes[]"),
    _arg("owner", "address"),
    _arg("price", "uint256"),
    _arg("fee", "uint256"),
    _arg("paymentReceiver", "address"),
    _arg("expiry", "uint256"),
    _arg("nonce", "bytes32"),
]

L2_MINT_CONTEXT_V2 = L2_MINT_CONTEXT + [
    _arg("verifiedMinter", "address"),
    _arg("signatureExpiry", "uint256"),
]

L2_CONTROLLER_ABI = [
    _fn(
        "mint",
        [
            _arg("context", "tuple", L2_MINT_CONTEXT),
            _arg("signature", "bytes"),
            _arg("extraData", "bytes"),
        ],
        [],
        "payable",
    ),
]

L2_CONTROLLER_V2_ABI = [
    _fn(
        "mint",
        [
            _arg("context", "tuple", L2_MINT_CONTEXT_V2),
            _arg("signature", "bytes"),
            _arg("extraData", "bytes"),
        ],
        [],
        "payable",
    ),
]
