# Copyright 2026 Zsolt Kulcsar and Contributors. Licensed under the EUPL-1.2 or later
"""Generated browser module that injects the sprite into a live page."""

import base64
import hashlib
import json

from spriteify.config import InjectPosition
from spriteify.normalizer import SVG_NAMESPACE

_REDUNDANT_XMLNS: str = f' xmlns="{SVG_NAMESPACE}"'

_MODULE_TEMPLATE: str = """if (typeof window !== 'undefined') {{
  function loadSvg() {{
    var body = document.body;
    var svgDom = document.getElementById({dom_id});
    if (!svgDom) {{
      svgDom = document.createElementNS({namespace}, 'svg');
      svgDom.style.position = 'absolute';
      svgDom.style.width = '0';
      svgDom.style.height = '0';
      svgDom.id = {dom_id};
      svgDom.setAttribute('aria-hidden', 'true');
    }}
    svgDom.innerHTML = {html};
    {insert}
  }}
  if (document.readyState === 'loading') {{
    document.addEventListener('DOMContentLoaded', loadSvg);
  }} else {{
    loadSvg();
  }}
}}
"""


def dom_inject(inject: InjectPosition) -> str:
    """Return the statement placing the container at ``inject``."""
    if inject == "first":
        return "body.insertBefore(svgDom, body.firstChild);"
    return "body.appendChild(svgDom);"


def create_module_code(html: str, dom_id: str, inject: InjectPosition) -> str:
    """Render the injection module for aggregated symbol markup.

    Args:
        html: Aggregated symbol markup.
        dom_id: Id of the hidden container element.
        inject: Container position in the document body.

    Returns:
        JavaScript module source.
    """
    return _MODULE_TEMPLATE.format(
        dom_id=json.dumps(dom_id),
        namespace=json.dumps(SVG_NAMESPACE),
        html=json.dumps(html.replace(_REDUNDANT_XMLNS, "")),
        insert=dom_inject(inject),
    )


def weak_etag(payload: str) -> str:
    """Return a weak entity tag derived from ``payload``."""
    data = payload.encode("utf-8")
    digest = base64.b64encode(hashlib.sha1(data).digest()).decode("ascii")  # noqa: S324
    return f'W/"{len(data):x}-{digest[:27]}"'
