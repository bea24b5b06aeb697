"""Self-contained HTML document for a flower view.

The document embeds the current flower SVG, the legend placed by the
responsive shell, the zoom mirror panel, one hidden template per ring with
that year's precomputed mirror content, and a short script that replays the
ring and petal hover behavior in the browser.
"""

from __future__ import annotations

import html as _html
from typing import Any, Optional

from .shell import LegendRenderer

FLOWER_CSS = """
body { margin: 0; padding: 24px; background: #f3f4f6;
       font-family: system-ui, -apple-system, sans-serif; }
.flower-container { position: relative; display: inline-flex; gap: 20px;
                    padding: 24px; background: #ffffff; border-radius: 8px;
                    box-shadow: 0 10px 25px rgba(0,0,0,0.15); }
.flower-canvas { overflow: hidden; }
.flower-side { display: flex; flex-direction: column; gap: 16px; width: 180px; }
.external-legend, .external-zoom { background: #f8f9fa; border: 1px solid #dee2e6;
                                   border-radius: 5px; padding: 10px;
                                   box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
.legend-title, .zoom-title { font-size: 12px; font-weight: bold; text-align: center;
                             margin-bottom: 10px; }
.legend-item { display: flex; align-items: center; margin-bottom: 8px; font-size: 11px; }
.legend-swatch { width: 16px; height: 16px; opacity: 0.8; margin-right: 8px;
                 border-radius: 2px; display: inline-block; }
.legend-note { font-size: 9px; color: #6c757d; text-align: center; margin-top: 10px; }
.legend-toggle { position: absolute; top: 10px; right: 10px; z-index: 10;
                 background: #ffffff; border: 1px solid #dee2e6; border-radius: 20px;
                 padding: 8px 12px; cursor: pointer; font-size: 12px;
                 box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
.mobile-overlay { position: absolute; top: 50px; right: 10px; width: 160px; z-index: 20;
                  background: rgba(248, 249, 250, 0.95); backdrop-filter: blur(10px);
                  box-shadow: 0 4px 12px rgba(0,0,0,0.15); }
.mobile-overlay .legend-item { font-size: 10px; margin-bottom: 6px; }
.mobile-overlay .legend-swatch { width: 12px; height: 12px; margin-right: 6px; }
.zoom-content { text-align: center; }
.zoom-ring-svg { display: block; margin: 0 auto; }
.zoom-year-text { font-size: 12px; font-weight: bold; margin-top: 5px; }
.zoom-instruction { font-size: 10px; color: #6c757d; margin-top: 10px; }
.zoom-events-text { font-size: 9px; color: #495057; margin-top: 8px; max-height: 120px;
                    overflow-y: auto; padding-right: 5px; text-align: left; }
.zoom-event-row { margin-bottom: 2px; }
.petal { transition: opacity 200ms; }
.flower-container.is-mobile { flex-direction: column; }
.flower-container.is-mobile .flower-side { width: auto; }
"""

FLOWER_SCRIPT = """
(function () {
  var SVG_NS = 'http://www.w3.org/2000/svg';
  var flower = document.getElementById('flower');
  var body = document.getElementById('zoom-body');
  function showTemplate(id) {
    var tpl = document.getElementById(id);
    if (tpl && body) { body.innerHTML = tpl.innerHTML; }
  }
  document.querySelectorAll('g.ring').forEach(function (group) {
    var idx = group.getAttribute('data-ring-index');
    var year = group.getAttribute('data-year');
    var band = group.querySelector('.ring-hit');
    group.addEventListener('mouseenter', function () {
      var hkey = 'ring-highlight-' + idx;
      if (band && !document.getElementById(hkey)) {
        var line = document.createElementNS(SVG_NS, 'circle');
        line.setAttribute('id', hkey);
        line.setAttribute('class', 'ring-highlight');
        line.setAttribute('r', band.getAttribute('data-outer-radius'));
        line.setAttribute('fill', 'none');
        line.setAttribute('stroke', '#333');
        line.setAttribute('stroke-width', '2');
        line.setAttribute('opacity', '0.3');
        line.setAttribute('pointer-events', 'none');
        group.appendChild(line);
      }
      var key = 'year-tooltip-' + idx;
      if (!document.getElementById(key)) {
        var label = document.createElementNS(SVG_NS, 'text');
        label.setAttribute('id', key);
        label.setAttribute('class', 'year-label');
        label.setAttribute('x', '0');
        label.setAttribute('y', '0');
        label.setAttribute('text-anchor', 'middle');
        label.setAttribute('font-size', '14px');
        label.setAttribute('font-weight', 'bold');
        label.setAttribute('fill', '#EF5350');
        label.setAttribute('pointer-events', 'none');
        label.textContent = 'Year: ' + year;
        flower.appendChild(label);
      }
      showTemplate('zoom-ring-' + idx);
    });
    group.addEventListener('mouseleave', function () {
      var line = document.getElementById('ring-highlight-' + idx);
      if (line) { line.parentNode.removeChild(line); }
      var label = document.getElementById('year-tooltip-' + idx);
      if (label) { label.parentNode.removeChild(label); }
      showTemplate('zoom-placeholder');
    });
  });
  document.querySelectorAll('.petal').forEach(function (petal) {
    petal.addEventListener('mouseenter', function () { petal.setAttribute('opacity', '0.7'); });
    petal.addEventListener('mouseleave', function () { petal.setAttribute('opacity', '0.4'); });
  });
  var toggle = document.querySelector('.legend-toggle');
  var overlay = document.querySelector('.mobile-overlay');
  if (toggle && overlay) {
    toggle.addEventListener('click', function () {
      var open = overlay.hasAttribute('hidden');
      if (open) { overlay.removeAttribute('hidden'); } else { overlay.setAttribute('hidden', ''); }
      toggle.setAttribute('aria-expanded', open ? 'true' : 'false');
    });
  }
})();
"""


def render_html_document(
    view: Any,
    title: Optional[str] = None,
    include_script: bool = True,
) -> str:
    """Compose the full page for a ``FlowerView``.

    Args:
        view: The component to export; its current scene (including any
            active hover effects) is embedded as-is.
        title: Document title; defaults to the location and year span.
        include_script: Whether to embed the hover script.

    Returns:
        HTML string.
    """
    sel = view.selection
    shell = view.shell
    doc_title = title or f"{sel.location_code} Climate Events ({sel.first_year}-{sel.last_year})"

    templates = "".join(
        f'<template id="zoom-ring-{idx}">{panel}</template>'
        for idx, panel in view.year_panels().items()
    )
    templates += (
        f'<template id="zoom-placeholder">{view.mirror_renderer.render_placeholder()}</template>'
    )
    script = f"<script>{FLOWER_SCRIPT}</script>" if include_script else ""
    container_class = "flower-container is-mobile" if shell.is_mobile else "flower-container"

    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{_html.escape(doc_title)}</title>
<style>{FLOWER_CSS}</style>
</head>
<body>
<div class="{container_class}" data-legend-mode="{shell.legend_mode}">
    <div class="flower-canvas" style="width: {shell.width:g}px; height: {shell.height:g}px">
        {view.to_svg()}
    </div>
    <div class="flower-side">
        {LegendRenderer().render(shell)}
        <div class="external-zoom">
            <div class="zoom-title">Zoom View</div>
            <div id="zoom-body">{view.mirror_html()}</div>
        </div>
    </div>
    {templates}
</div>
{script}
</body>
</html>
"""
