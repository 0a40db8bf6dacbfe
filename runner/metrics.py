# runner/metrics.py
from prometheus_client import start_http_server, Counter, Gauge
import threading
import logging

# Metrics
PAGES_COUNTER = Counter("specsheet_pages_total", "Pages processed into spec sheets", ["status"])
ELEMENTS_COUNTER = Counter("specsheet_elements_total", "Interactive elements documented", ["kind"])
BROWSER_UP = Gauge("specsheet_browser_up", "1 if the capture browser is up, 0 otherwise")

_metrics_server_started = False
_metrics_lock = threading.Lock()

def start_metrics_server(port: int):
    global _metrics_server_started
    with _metrics_lock:
        if _metrics_server_started:
            return
        start_http_server(port)
        _metrics_server_started = True
        logging.getLogger("specsheet.metrics").info(f"Prometheus metrics server started on port {port}")
