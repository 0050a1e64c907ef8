class SassImporterError(Exception):
    # base exception for all application-specific errors.
    pass

class ConfigError(SassImporterError):
    # errors related to configuration.
    pass

class ResolutionError(SassImporterError):
    # errors reported by the package resolver.
    def __init__(self, message: str, request: str = "", code: str = "RESOLUTION_ERROR"):
        super().__init__(message)
        self.request = request
        self.code = code

class PackageNotFoundError(ResolutionError):
    # the requested package or file does not exist.
    def __init__(self, request: str, basedir: str = ""):
        where = f" from '{basedir}'" if basedir else ""
        super().__init__(f"cannot find module '{request}'{where}", request=request, code="MODULE_NOT_FOUND")
        self.basedir = basedir

class ResolverConfigError(ResolutionError):
    # malformed request or resolver options.
    def __init__(self, message: str, request: str = ""):
        super().__init__(message, request=request, code="INVALID_RESOLVER_OPTIONS")
