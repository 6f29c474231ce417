# observability/__init__.py
# Prometheus exporter for the brake and its monitor loop
