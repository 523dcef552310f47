from typing import TypedDict

PASSAGE_TAG = "tw-passagedata"
STYLE_TAG = "style"
SCRIPT_TAG = "script"

# Largest integer a JS-side story engine can represent exactly (Number.MAX_SAFE_INTEGER).
MAX_SAFE_INTEGER = 2**53 - 1


class CombinedNodeSpec(TypedDict):
    tag: str
    header_kind: str
    attributes: dict[str, str]


STYLE_NODE: CombinedNodeSpec = {
    "tag": STYLE_TAG,
    "header_kind": "twine-user-stylesheet",
    "attributes": {
        "type": "text/twine-css",
        "role": "stylesheet",
        "id": "twine-user-stylesheet",
    },
}

SCRIPT_NODE: CombinedNodeSpec = {
    "tag": SCRIPT_TAG,
    "header_kind": "twine-user-script",
    "attributes": {
        "type": "text/twine-javascript",
        "role": "script",
        "id": "twine-user-script",
    },
}
