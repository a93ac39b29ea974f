"""HTML rendering for the metrics dashboard and the upload form.

Documents are ``string.Template`` strings. Every user-supplied value is
HTML-escaped before substitution, and chart data is embedded as JSON.
"""

from __future__ import annotations

import json
from html import escape
from string import Template
from typing import TYPE_CHECKING

from promdash.dashboard.formatting import (
    format_label,
    format_labels,
    format_number,
    format_timestamp,
    format_value,
)

if TYPE_CHECKING:
    from collections.abc import Sequence

    from promdash.metrics.models import HistogramAccumulator, ParsedMetrics, SnapshotRef

TOTAL_REQUESTS = "cloudflared_tunnel_total_requests"
REQUEST_ERRORS = "cloudflared_tunnel_request_errors"
HA_CONNECTIONS = "cloudflared_tunnel_ha_connections"
CONNECT_LATENCY = "cloudflared_proxy_connect_latency"
SOURCE_PORTS = "cloudflared_tcp_total_sessions"

CHART_JS_URL = "https://cdn.jsdelivr.net/npm/chart.js"
GRAFANA_GUIDE_URL = "https://developers.cloudflare.com/cloudflare-one/tutorials/grafana/"
TUNNEL_PARAMS_URL = (
    "https://developers.cloudflare.com/cloudflare-one/connections/connect-networks/"
    "configure-tunnels/cloudflared-parameters/#update-tunnel-run-parameters"
)

_BASE_STYLE = """\
      body { font-family: Arial, sans-serif; margin: 40px; background-color: #f5f5f5; }
      a { color: #0066cc; }
      .info-note { background: #ffe0b2; padding: 10px; border-radius: 4px; font-style: italic; }
      .highlight { background: #ffeb3b; padding: 2px 5px; border-radius: 3px; font-weight: bold; }
"""

_DASHBOARD = Template("""\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
    <title>Cloudflare Tunnel Metrics Dashboard</title>
    <script src="$chart_js_url"></script>
    <style>
$base_style\
      .dashboard { max-width: 1000px; margin: 0 auto; background: #F5A623; padding: 20px;
                   border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); color: #333; }
      .section { margin: 20px 0; }
      .metric { padding: 10px; border-bottom: 1px solid #e59400; }
      .label { font-weight: bold; color: #333; }
      .value { color: #0066cc; margin-left: 10px; }
      canvas { max-width: 100%; background: white; padding: 10px; border-radius: 4px; }
      .summary { background: #fff3e0; padding: 15px; border-radius: 4px; }
    </style>
  </head>
  <body>
    <div class="dashboard">
      <h1>$heading</h1>
      <p><a href="/">Upload another metrics file</a></p>
      <div class="info-note">
        For a more advanced setup, you can integrate with Grafana following
        <a href="$grafana_url" target="_blank">this guide</a>.
        This dashboard offers a quick overview without the need to set up Grafana and Prometheus.
      </div>

      <div class="section">
        <h2>Summary</h2>
        <div class="summary">$summary</div>
      </div>

      <div class="section">
        <h2>Key Metric: Source Ports Used</h2>
        <div class="metric">
          <span class="label">Total TCP Sessions (Source Ports)</span>
          <span class="value highlight" id="source-ports">$source_ports</span>
        </div>
      </div>

      <div class="section">
        <h2>Gauges</h2>
$gauges
      </div>

      <div class="section">
        <h2>Counters</h2>
        <canvas id="countersChart"></canvas>
        <script>
$counters_chart
        </script>
      </div>

      <div class="section">
        <h2>Histograms</h2>
$histograms
      </div>
    </div>
  </body>
</html>
""")

_SUMMARY = Template("""\
<p>This system has handled <strong>$total_requests</strong> total requests through its tunnels,
with <strong>$request_errors</strong> errors encountered.
It's currently maintaining <strong>$ha_connections</strong> active high-availability connections.
The average connection latency is <strong>$latency ms</strong>, and it has used
<strong class="highlight">$source_ports</strong> TCP sessions (likely source ports).</p>""")

_GAUGE_ROW = Template("""\
        <div class="metric">
          <span class="label">$label</span>
          <span class="value">$value</span>$labels
        </div>""")

_HISTOGRAM_BLOCK = Template("""\
        <div class="metric">
          <span class="label">$label</span>
          <div>Avg: $average ms, Count: $count</div>
          <canvas id="$canvas_id"></canvas>
          <script>
$chart
          </script>
        </div>""")

_BAR_CHART = Template("""\
            new Chart(document.getElementById($canvas_id).getContext('2d'), {
              type: 'bar',
              data: {
                labels: $labels,
                datasets: [{ label: 'Count', data: $data, backgroundColor: '#0066cc' }]
              },
              options: { scales: { y: { beginAtZero: true } } }
            });""")

_UPLOAD_FORM = Template("""\
<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
    <title>Cloudflare Tunnel Metrics Dashboard - Upload</title>
    <style>
$base_style\
      .container { max-width: 600px; margin: 0 auto; background: #F5A623; padding: 20px;
                   border-radius: 8px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); color: #333; }
      input[type="file"] { margin: 10px 0; }
      input[type="submit"] { background: #0066cc; color: white; padding: 10px 20px; border: none;
                             border-radius: 4px; cursor: pointer; }
      input[type="submit"]:hover { background: #0055aa; }
      .history { margin-top: 20px; }
      .history-item { padding: 5px 0; }
      .info-note { margin-top: 20px; }
    </style>
  </head>
  <body>
    <div class="container">
      <h1>Cloudflare Tunnel Metrics Dashboard</h1>
      <form method="POST" enctype="multipart/form-data">
        <label for="metricsFile">Upload Metrics File:</label><br>
        <input type="file" id="metricsFile" name="metricsFile" accept=".txt,.prom" required><br>
        <input type="submit" value="Upload and View Dashboard">
      </form>
      <div class="history">
        <h2>Recent Uploads (Last 2)</h2>
$history
      </div>
      <div class="info-note">
        <p><strong>How to fetch your metrics file:</strong></p>
        <ul>
          <li>Search for "metrics" in your Cloudflare tunnel logs to find the endpoint
            (e.g., <code>curl 127.0.0.1:20241/metrics</code>).</li>
          <li>Check the tunnel startup logs; metrics endpoint details are typically shown when
            <code>cloudflared</code> starts.</li>
          <li>If your tunnel was created via the dashboard, add the <code>--metrics</code> flag to your
            <code>cloudflared</code> system service configuration.
            Refer to <a href="$params_url" target="_blank">these instructions</a> for details.</li>
        </ul>
      </div>
    </div>
  </body>
</html>
""")

_HISTORY_ITEM = Template("""\
        <div class="history-item"><a href="/?timestamp=$timestamp">$when</a></div>""")


def _js(value: object) -> str:
    """Serialize ``value`` for embedding inside a ``<script>`` block."""
    return json.dumps(value, ensure_ascii=False).replace("</", "<\\/")


def _bar_chart(canvas_id: str, labels: list[str], data: list[float]) -> str:
    return _BAR_CHART.substitute(
        canvas_id=_js(canvas_id),
        labels=_js(labels),
        data=_js(data),
    )


def _labelled(name: str, labels: dict[str, str]) -> str:
    text = format_label(name)
    if labels:
        text += f" ({format_labels(labels)})"
    return text


def render_summary(metrics: ParsedMetrics) -> str:
    """Render the one-paragraph summary of well-known cloudflared metrics."""
    latency = metrics.histograms.get(CONNECT_LATENCY)
    average = latency.average if latency is not None else 0.0
    return _SUMMARY.substitute(
        total_requests=format_number(metrics.counter_value(TOTAL_REQUESTS)),
        request_errors=format_number(metrics.counter_value(REQUEST_ERRORS)),
        ha_connections=format_number(metrics.gauge_value(HA_CONNECTIONS)),
        latency=f"{average:.2f}",
        source_ports=format_number(metrics.counter_value(SOURCE_PORTS)),
    )


def _render_gauges(metrics: ParsedMetrics) -> str:
    rows = []
    for name, sample in metrics.gauges.items():
        labels = f" ({escape(format_labels(sample.labels))})" if sample.labels else ""
        rows.append(
            _GAUGE_ROW.substitute(
                label=escape(format_label(name)),
                value=escape(format_value(name, sample.value)),
                labels=labels,
            ),
        )
    return "\n".join(rows)


def _render_histogram(index: int, name: str, histogram: HistogramAccumulator) -> str:
    canvas_id = f"histogram_{index}"
    chart = _bar_chart(
        canvas_id,
        [f"≤{bucket.le}" for bucket in histogram.buckets],
        [bucket.count for bucket in histogram.buckets],
    )
    return _HISTOGRAM_BLOCK.substitute(
        label=escape(format_label(name)),
        average=f"{histogram.average:.2f}",
        count=format_number(histogram.count or 0),
        canvas_id=canvas_id,
        chart=chart,
    )


def render_dashboard(metrics: ParsedMetrics, timestamp: int | None = None) -> str:
    """Render the full dashboard document.

    Args:
        metrics: Parsed snapshot to display.
        timestamp: Snapshot time in epoch milliseconds, shown in the
            heading. None omits the date.

    Returns:
        A self-contained HTML document. Missing metrics render as 0 or as
        empty sections.
    """
    heading = "Cloudflare Tunnel Metrics Dashboard"
    if timestamp is not None:
        heading += f" - {format_timestamp(timestamp)}"

    counters_chart = _bar_chart(
        "countersChart",
        [_labelled(name, sample.labels) for name, sample in metrics.counters.items()],
        [sample.value for sample in metrics.counters.values()],
    )
    histograms = "\n".join(
        _render_histogram(index, name, histogram)
        for index, (name, histogram) in enumerate(metrics.histograms.items())
    )

    return _DASHBOARD.substitute(
        chart_js_url=CHART_JS_URL,
        base_style=_BASE_STYLE,
        heading=escape(heading),
        grafana_url=GRAFANA_GUIDE_URL,
        summary=render_summary(metrics),
        source_ports=format_number(metrics.counter_value(SOURCE_PORTS)),
        gauges=_render_gauges(metrics),
        counters_chart=counters_chart,
        histograms=histograms,
    )


def render_upload_form(recent: Sequence[SnapshotRef]) -> str:
    """Render the upload page listing recent snapshots.

    Args:
        recent: Snapshots to link to, newest first.

    Returns:
        A self-contained HTML document.
    """
    if recent:
        history = "\n".join(
            _HISTORY_ITEM.substitute(
                timestamp=ref.timestamp,
                when=escape(format_timestamp(ref.timestamp)),
            )
            for ref in recent
        )
    else:
        history = "        <p>No metrics uploaded yet.</p>"

    return _UPLOAD_FORM.substitute(
        base_style=_BASE_STYLE,
        history=history,
        params_url=TUNNEL_PARAMS_URL,
    )
