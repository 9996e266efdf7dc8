from __future__ import annotations


def camel_to_snake(s: str) -> str:
    """
    Deterministic camelCase / PascalCase -> snake_case used whenever a table or
    column name is not declared explicitly.

      'MediaModel'     -> 'media_model'
      'mediaCategory'  -> 'media_category'
      'name'           -> 'name'
    """
    out = []
    for i, ch in enumerate(s):
        if ch.isupper() and i > 0:
            out.append("_")
        out.append(ch.lower())
    return "".join(out)
