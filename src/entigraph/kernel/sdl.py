"""Render a Schema as SDL text.

Output order is fixed: custom scalars sorted by name, entity types in graph
order, the query type last. Built-in scalars are not declared.
"""

from typing import List

from .schema import FieldDef, ObjectTypeDef, Schema

INDENT = "  "


def _print_field(field: FieldDef) -> str:
    if field.args:
        args = ", ".join(f"{a.name}: {a.type}" for a in field.args)
        return f"{INDENT}{field.name}({args}): {field.type}"
    return f"{INDENT}{field.name}: {field.type}"


def print_object_type(object_type: ObjectTypeDef) -> str:
    if not object_type.fields:
        # no empty braces in SDL
        return f"type {object_type.name}"
    lines = [f"type {object_type.name} {{"]
    lines.extend(_print_field(f) for f in object_type.fields.values())
    lines.append("}")
    return "\n".join(lines)


def print_schema(schema: Schema) -> str:
    """Render the schema as SDL."""
    blocks: List[str] = [
        f"scalar {s.name}" for s in schema.scalars.values() if not s.builtin
    ]
    blocks.extend(print_object_type(t) for t in schema.types.values())
    blocks.append(print_object_type(schema.query))
    return "\n\n".join(blocks) + "\n"
