class CaseBrowserError(Exception):
    """Base exception for all case_browser errors"""
    pass

class ConfigError(CaseBrowserError):
    """Invalid or inconsistent table definition, TableConfig or global config"""
    pass

class PaginationModeError(CaseBrowserError):
    """
    A page operation was requested on a table whose pagination mode does not
    support it (e.g. set_page on an infinite-scroll table)
    """
    pass
