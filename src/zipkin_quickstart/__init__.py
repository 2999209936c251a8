"""Zipkin quick-start installer: resolve, download and verify a Zipkin artifact."""
