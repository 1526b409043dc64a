from enum import Enum


class ValidateErrorTypeEnum(str, Enum):
    missing = "missing"

    # type
    bool_type = "bool_type"
    int_type = "int_type"
    string_type = "string_type"

    # string_error
    string_too_short = "string_too_short"
    string_pattern_mismatch = "string_pattern_mismatch"

    # pase_error
    int_parsing = "int_parsing"
    bool_parsing = "bool_parsing"
    int_from_float = "int_from_float"

    # value_error
    value_error = "value_error"
    greater_than = "greater_than"
    enum = "enum"


# 归类为 "缺少配置" 的错误类型, 其余均为参数格式错误
MissingErrorTypes = {
    ValidateErrorTypeEnum.missing,
}


ValidationErrorMsgTemplates = {
    ValidateErrorTypeEnum.missing: "is required",
    # type
    ValidateErrorTypeEnum.bool_type: "is not a valid boolean",
    ValidateErrorTypeEnum.int_type: "is not a valid integer",
    ValidateErrorTypeEnum.string_type: "is not a valid string",
    # string_error
    ValidateErrorTypeEnum.string_too_short: "must have at least {min_length} characters",
    ValidateErrorTypeEnum.string_pattern_mismatch: "does not match pattern {pattern}",
    # pase_error
    ValidateErrorTypeEnum.int_parsing: "is not a valid integer",
    ValidateErrorTypeEnum.bool_parsing: "is not a valid boolean",
    ValidateErrorTypeEnum.int_from_float: "must be a whole number",
    # value_error
    ValidateErrorTypeEnum.value_error: "is invalid",
    ValidateErrorTypeEnum.greater_than: "must be greater than {gt}",
    ValidateErrorTypeEnum.enum: "must be one of: {expected}",
}


def format_validation_error(field_name: str, error_type: str, ctx: dict | None = None) -> str:
    """把 pydantic 校验错误转换为可读文本"""
    template = ValidationErrorMsgTemplates.get(error_type)  # type: ignore[call-overload]
    if template is None:
        return f"{field_name}: {error_type}"
    try:
        return f"{field_name} {template.format(**(ctx or {}))}"
    except KeyError:
        return f"{field_name} {template}"
