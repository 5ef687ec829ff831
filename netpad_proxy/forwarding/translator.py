"""
Translate NetPad tool descriptors into OpenAI function-calling descriptors.

NetPad shape::

    {"invoke": "...", "internalName": "...", "description": "...",
     "parameters": {"properties": {...}, "required": [...]}}

OpenAI shape::

    {"type": "function",
     "function": {"name": "...", "description": "...",
                  "parameters": {"type": "object", "properties": {...},
                                 "required": [...]}}}

Translation is pure and order-preserving. No schema validation is done:
keys missing from the source stay missing in the output.
"""

from typing import Any, Dict, Iterable, List, Mapping


def _as_mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def convert_property(key: str, param: Any) -> Dict[str, Any]:
    """Convert one NetPad parameter into an OpenAI property schema."""
    param = _as_mapping(param)

    prop: Dict[str, Any] = {}
    if "type" in param:
        prop["type"] = param["type"]
    prop["description"] = param.get("description") or key

    if param.get("enum") is not None:
        prop["enum"] = param["enum"]

    # falsy defaults (0, False, "", None) are real values
    if "default" in param:
        prop["default"] = param["default"]

    return prop


def convert_properties(properties: Any) -> Dict[str, Dict[str, Any]]:
    return {
        key: convert_property(key, param)
        for key, param in _as_mapping(properties).items()
    }


def translate_tool(tool: Any) -> Dict[str, Any]:
    """Convert a single NetPad tool descriptor."""
    tool = _as_mapping(tool)
    parameters = _as_mapping(tool.get("parameters"))

    function: Dict[str, Any] = {}
    name = tool.get("invoke") or tool.get("internalName")
    if name is not None:
        function["name"] = name
    if "description" in tool:
        function["description"] = tool["description"]

    required = parameters.get("required")
    function["parameters"] = {
        "type": "object",
        "properties": convert_properties(parameters.get("properties")),
        "required": list(required) if required else [],
    }

    return {"type": "function", "function": function}


def translate_tools(tools: Iterable[Any]) -> List[Dict[str, Any]]:
    """
    Convert a NetPad tool list into OpenAI function descriptors.

    Args:
        tools: NetPad tool descriptors, in upstream order

    Returns:
        One function descriptor per tool, same order
    """
    return [translate_tool(tool) for tool in tools]


def extract_tool_list(body: Any) -> List[Any]:
    """
    Pull the tool list out of a NetPad ``/tools`` response.

    NetPad wraps the list as ``{"success": true, "data": [...]}``; anything
    else yields an empty list.
    """
    data = _as_mapping(body).get("data")
    if isinstance(data, list):
        return data
    return []
