# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Type manifest generation for icon identifiers."""

import json
import logging

from spriteify.naming import to_title_case

logger = logging.getLogger(__name__)

MANIFEST_HEADER: str = "// This file is generated by spriteify. Do not edit manually."
TYPE_NAME: str = "IconName"
LIST_NAME: str = "iconNames"


def generate_manifest(names: list[str], namespace: str | None = None) -> str:
    """Generate a TypeScript manifest over the given identifiers.

    The manifest holds a string-literal union type and a readonly runtime
    list of the same values, in the order given. Repeated names are kept once.

    Args:
        names: Icon identifiers.
        namespace: Group name prefixed, title-cased, to both exported names.

    Returns:
        Manifest text.
    """
    unique_names = list(dict.fromkeys(names))
    type_name = TYPE_NAME
    list_name = LIST_NAME
    if namespace:
        prefix = to_title_case(namespace)
        type_name = f"{prefix}{TYPE_NAME}"
        list_name = f"{prefix}{LIST_NAME[:1].upper()}{LIST_NAME[1:]}"

    literals = [json.dumps(name) for name in unique_names]
    lines = [MANIFEST_HEADER, ""]
    if literals:
        lines.append(f"export type {type_name} =")
        lines.extend(f"  | {literal}" for literal in literals[:-1])
        lines.append(f"  | {literals[-1]};")
    else:
        lines.append(f"export type {type_name} = never;")
    lines.append("")
    lines.append(f"export const {list_name} = [{', '.join(literals)}] as const;")
    lines.append("")
    lines.append(
        f"export const is{type_name} = (value: string): value is {type_name} =>"
    )
    lines.append(f"  ({list_name} as readonly string[]).includes(value);")
    logger.debug(f"Manifest generated (namespace={namespace} names={len(unique_names)})")
    return "\n".join(lines) + "\n"
