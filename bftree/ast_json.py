"""JSON serialization/deserialization for bftree ASTs.

This module converts between the AST dataclasses and plain Python
dict/list structures suitable for JSON encoding. Source positions are
stored as `[offset, line, column]` triples so that a tree read back
reports errors at the same places as the one it was written from.
"""

from __future__ import annotations

from typing import Any, Dict, List

from .ast import Block, Loop, Move, Update, Output, Input, Node
from .types import SourcePosition


def pos_to_obj(pos: SourcePosition) -> List[int]:
    return [pos.offset, pos.line, pos.column]


def pos_from_obj(o: List[int]) -> SourcePosition:
    offset, line, column = o
    return SourcePosition(int(offset), int(line), int(column))


def ast_to_obj(node: Any) -> Dict[str, Any]:
    if not isinstance(node, Node):
        raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")
    pos = pos_to_obj(node.pos)
    if isinstance(node, Block):
        return {"type": "Block", "pos": pos, "body": [ast_to_obj(n) for n in node.body]}
    if isinstance(node, Loop):
        return {"type": "Loop", "pos": pos, "body": ast_to_obj(node.body)}
    if isinstance(node, Move):
        return {"type": "Move", "pos": pos, "step": node.step}
    if isinstance(node, Update):
        return {"type": "Update", "pos": pos, "delta": node.delta}
    if isinstance(node, Output):
        return {"type": "Output", "pos": pos}
    if isinstance(node, Input):
        return {"type": "Input", "pos": pos}

    raise TypeError(f"Unsupported node for serialization: {type(node).__name__}")


def ast_from_obj(obj: Any) -> Any:
    if not isinstance(obj, dict):
        raise TypeError("Invalid AST object")
    t = obj.get("type")
    pos = pos_from_obj(obj["pos"])
    if t == "Block":
        return Block(pos, [ast_from_obj(n) for n in obj["body"]])
    if t == "Loop":
        body = ast_from_obj(obj["body"])
        if not isinstance(body, Block):
            raise ValueError("Loop body must be a Block")
        return Loop(pos, body)
    if t == "Move":
        return Move(pos, _unit(obj["step"], "step"))
    if t == "Update":
        return Update(pos, _unit(obj["delta"], "delta"))
    if t == "Output":
        return Output(pos)
    if t == "Input":
        return Input(pos)

    raise ValueError(f"Unknown AST node type: {t}")


def _unit(value: Any, field: str) -> int:
    if value not in (1, -1) or isinstance(value, bool):
        raise ValueError(f"{field} must be +1 or -1, got {value!r}")
    return int(value)
