class BasicError(Exception):
    pass

class BasicSyntaxError(BasicError, SyntaxError):
    def __init__(self, message, line=None, column=None):
        super().__init__(message)
        self.line = line
        self.column = column

class BasicRuntimeError(BasicError):
    pass

class StepLimitExceeded(BasicRuntimeError):
    def __init__(self, limit):
        super().__init__(f"Step limit of {limit} statements exceeded")
        self.limit = limit
