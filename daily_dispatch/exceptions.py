class DispatchError(Exception):
    pass


class ValidationError(DispatchError):
    pass


class ParsingError(DispatchError):
    pass


class NetworkError(DispatchError):
    pass


class ExternalServiceError(DispatchError):
    pass


class NewsProviderError(ExternalServiceError):
    pass


class LLMServiceError(ExternalServiceError):
    pass


class DatabaseError(DispatchError):
    pass


class GraphConnectionError(DatabaseError):
    pass

