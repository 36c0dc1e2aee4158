from enum import Enum


class InternalError(Exception):
    """Errors of this type are considered bugs in the library. Ideally,
this should never be raised. If it is, there is a bug that needs to be
fixed.

    """
    pass


class ErrorCode(Enum):
    MALFORMED_TEMPLATE = 'Malformed format template'
    MISSING_ARGUMENT = 'Missing argument'
    KIND_MISMATCH = 'Argument kind mismatch'
    INDEX_OUT_OF_RANGE = 'Index out of range'
    INVALID_NUMBER = 'Invalid number'


class StringsError(Exception):
    default_code = None

    def __init__(self, err_code: ErrorCode = None, msg=None, *, loc=None):
        if err_code is None:
            err_code = self.default_code
        if err_code is None:
            raise InternalError('No error code for exception')
        if not msg:
            msg = err_code.value
        elif not isinstance(msg, str):
            raise InternalError(
                'Invalid exception message: must be a string')
        super().__init__(msg)
        self.code = err_code
        self.msg = msg
        self.loc = loc

    def __repr__(self):
        return self.msg

    def __str__(self):
        return repr(self)


class MalformedTemplate(StringsError):
    default_code = ErrorCode.MALFORMED_TEMPLATE


class MissingArgument(StringsError):
    default_code = ErrorCode.MISSING_ARGUMENT


class KindMismatch(StringsError, TypeError):
    default_code = ErrorCode.KIND_MISMATCH


class IndexOutOfRange(StringsError, IndexError):
    default_code = ErrorCode.INDEX_OUT_OF_RANGE


class InvalidNumber(StringsError, ValueError):
    default_code = ErrorCode.INVALID_NUMBER
