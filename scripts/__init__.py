"""
Deployment Scripts
==================

Entry points run against a named deployment:
- run_scenarios: applies every migration scenario of the deployment and
  prints its packed protocol configuration
"""

__version__ = "1.0.0"
