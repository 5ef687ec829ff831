"""
Unit Tests for the OpenAI Function Translator
=============================================

Tests for netpad_proxy/forwarding/translator.py
"""

from netpad_proxy.forwarding import translate_tools
from netpad_proxy.forwarding.translator import convert_property, extract_tool_list


def test_internal_name_used_without_invoke():
    tools = [
        {
            "internalName": "search",
            "description": "Find items",
            "parameters": {
                "properties": {"q": {"type": "string"}},
                "required": ["q"],
            },
        }
    ]

    assert translate_tools(tools) == [
        {
            "type": "function",
            "function": {
                "name": "search",
                "description": "Find items",
                "parameters": {
                    "type": "object",
                    "properties": {"q": {"type": "string", "description": "q"}},
                    "required": ["q"],
                },
            },
        }
    ]


def test_invoke_preferred_over_internal_name():
    [function] = translate_tools([{"invoke": "forms.search", "internalName": "search"}])

    assert function["function"]["name"] == "forms.search"


def test_empty_invoke_falls_back_to_internal_name():
    [function] = translate_tools([{"invoke": "", "internalName": "search"}])

    assert function["function"]["name"] == "search"


def test_falsy_defaults_are_kept():
    """Test that default false/0/None survive, only absence is dropped"""
    assert convert_property("flag", {"type": "boolean", "default": False})["default"] is False
    assert convert_property("n", {"type": "integer", "default": 0})["default"] == 0
    assert "default" in convert_property("x", {"type": "string", "default": None})
    assert "default" not in convert_property("y", {"type": "string"})


def test_enum_and_description_copied():
    prop = convert_property(
        "status",
        {"type": "string", "description": "Form status", "enum": ["draft", "published"]},
    )

    assert prop == {
        "type": "string",
        "description": "Form status",
        "enum": ["draft", "published"],
    }


def test_empty_description_falls_back_to_key():
    assert convert_property("limit", {"type": "integer", "description": ""})["description"] == "limit"


def test_missing_type_stays_missing():
    assert convert_property("q", {"description": "query"}) == {"description": "query"}


def test_missing_parameters_yield_empty_schema():
    [function] = translate_tools([{"internalName": "ping", "description": "Ping"}])

    assert function["function"]["parameters"] == {
        "type": "object",
        "properties": {},
        "required": [],
    }


def test_order_is_preserved():
    tools = [
        {
            "internalName": name,
            "parameters": {"properties": {"z": {}, "a": {}, "m": {}}},
        }
        for name in ("third", "first", "second")
    ]

    functions = translate_tools(tools)

    assert [f["function"]["name"] for f in functions] == ["third", "first", "second"]
    assert list(functions[0]["function"]["parameters"]["properties"]) == ["z", "a", "m"]


def test_extract_tool_list():
    assert extract_tool_list({"success": True, "data": [{"internalName": "a"}]}) == [
        {"internalName": "a"}
    ]
    assert extract_tool_list({"success": True}) == []
    assert extract_tool_list(["not", "wrapped"]) == []
    assert extract_tool_list(None) == []
