"""
HTML Visualization
==================

Embeds the D3 payload of a graph into a self-contained HTML page with a
force-directed layout, zoom, drag and tooltips.
"""

from __future__ import annotations

import json
from string import Template

from .exporters.serializer import GraphSerializer
from .models.graph_models import Graph

HTML_TEMPLATE = Template(
    """<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <title>$title</title>
  <script src="https://d3js.org/d3.v7.min.js"></script>
  <style>
    body { margin: 0; font-family: Arial, sans-serif; }
    #graph { width: 100vw; height: 100vh; }
    .node { cursor: pointer; }
    .link { stroke-opacity: 0.6; }
    .node text { font-size: 10px; }
    .tooltip {
      position: absolute;
      background: white;
      border: 1px solid #ddd;
      border-radius: 4px;
      padding: 10px;
      pointer-events: none;
      font-size: 12px;
    }
  </style>
</head>
<body>
  <div id="graph"></div>
  <script>
    const data = $payload;

    const width = window.innerWidth;
    const height = window.innerHeight;

    const tooltip = d3.select("body").append("div")
      .attr("class", "tooltip")
      .style("opacity", 0);

    const simulation = d3.forceSimulation(data.nodes)
      .force("link", d3.forceLink(data.links).id(d => d.id).distance(100))
      .force("charge", d3.forceManyBody().strength(-300))
      .force("center", d3.forceCenter(width / 2, height / 2));

    const svg = d3.select("#graph")
      .append("svg")
      .attr("width", width)
      .attr("height", height);

    const container = svg.append("g");

    svg.call(d3.zoom()
      .extent([[0, 0], [width, height]])
      .scaleExtent([0.1, 8])
      .on("zoom", (event) => container.attr("transform", event.transform)));

    const link = container.append("g")
      .selectAll("line")
      .data(data.links)
      .enter().append("line")
      .attr("stroke", d => d.type === "import" ? "#999" : "#66f")
      .attr("stroke-width", d => d.value)
      .attr("stroke-dasharray", d => d.type === "call" ? "5,5" : "")
      .attr("class", "link");

    const node = container.append("g")
      .selectAll(".node")
      .data(data.nodes)
      .enter().append("g")
      .attr("class", "node")
      .call(d3.drag()
        .on("start", dragstarted)
        .on("drag", dragged)
        .on("end", dragended));

    node.append("circle")
      .attr("r", 8)
      .attr("fill", d => d.group === 1 ? "#f66" : "#6cf");

    node.append("text")
      .attr("dx", 12)
      .attr("dy", ".35em")
      .text(d => d.label);

    node.on("mouseover", (event, d) => {
      tooltip.transition().duration(200).style("opacity", .9);
      tooltip.text(d.id)
        .style("left", (event.pageX + 10) + "px")
        .style("top", (event.pageY - 28) + "px");
    })
    .on("mouseout", () => tooltip.transition().duration(500).style("opacity", 0));

    simulation.on("tick", () => {
      link
        .attr("x1", d => d.source.x)
        .attr("y1", d => d.source.y)
        .attr("x2", d => d.target.x)
        .attr("y2", d => d.target.y);
      node.attr("transform", d => `translate($${d.x},$${d.y})`);
    });

    function dragstarted(event, d) {
      if (!event.active) simulation.alphaTarget(0.3).restart();
      d.fx = d.x;
      d.fy = d.y;
    }

    function dragged(event, d) {
      d.fx = event.x;
      d.fy = event.y;
    }

    function dragended(event, d) {
      if (!event.active) simulation.alphaTarget(0);
      d.fx = null;
      d.fy = null;
    }
  </script>
</body>
</html>
"""
)


def render_html(graph: Graph, title: str = "Dependency Graph Visualization") -> str:
    """Render the graph's D3 payload as a standalone HTML document."""
    payload = json.dumps(GraphSerializer().to_d3(graph), indent=2)
    # Keep module ids from closing the script element
    payload = payload.replace("</", "<\\/")
    return HTML_TEMPLATE.substitute(title=title, payload=payload)
