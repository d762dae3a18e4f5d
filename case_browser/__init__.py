"""
Top-level package for the case browser.

This package exposes the core architecture (table engine, config, UI adapters).
Most code should import from submodules such as:
    case_browser.core
    case_browser.config
    case_browser.ui
"""

__all__: list[str] = []
