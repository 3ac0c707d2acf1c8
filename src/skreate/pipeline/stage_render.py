"""Render Stage - Serialize a laid-out diagram as an SVG document.

This is the last stage of the pipeline. Output depends only on the
diagram, so identical input text always produces identical bytes.
"""

from skreate.models import Diagram, SvgElement, fmt_num

SVG_NS = "http://www.w3.org/2000/svg"
XLINK_NS = "http://www.w3.org/1999/xlink"

STYLE = "text { text-anchor: middle } path,rect,circle { fill:none; }"


def build_document(diagram: Diagram) -> SvgElement:
    """Assemble the root <svg> element."""
    bounds = diagram.bounds
    view_box = " ".join(fmt_num(v) for v in (bounds.min_x, bounds.min_y, bounds.width, bounds.height))
    svg = SvgElement(
        "svg",
        {
            "xmlns": SVG_NS,
            "xmlns:xlink": XLINK_NS,
            "width": bounds.width,
            "height": bounds.height,
            "viewBox": view_box,
        },
    )
    svg.add(SvgElement("title", {}, [diagram.title]))
    if diagram.description:
        svg.add(SvgElement("desc", {}, [diagram.description]))
    svg.add(SvgElement("style", {}, [STYLE]))
    if diagram.defs:
        svg.add(SvgElement("defs", {}, list(diagram.defs)))
    for element in diagram.background:
        svg.add(element)
    for rendered in diagram.elements:
        svg.add(rendered.element)
    return svg


def render_svg(diagram: Diagram) -> str:
    """Serialize a diagram to SVG text."""
    return build_document(diagram).to_string() + "\n"
