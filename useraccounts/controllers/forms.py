"""Request validation for account operations."""

from typing import Any, Dict, List, Mapping, Type, TypeVar

from werkzeug.datastructures import MultiDict
from wtforms import Form, StringField, PasswordField
from wtforms.validators import DataRequired, Email, Length, Optional

from ..exceptions import ValidationFailed

F = TypeVar('F', bound=Form)

INVALID_EMAIL = 'Invalid email address'
USER_NAME_RULES = [Length(min=4)]
PASSWORD_RULES = [Length(min=6)]


class RegistrationForm(Form):
    """Payload for registering a new account."""

    userName = StringField('userName', [DataRequired()] + USER_NAME_RULES)
    emailAddress = StringField('emailAddress',
                               [DataRequired(), Email(INVALID_EMAIL)])
    identityNumber = StringField('identityNumber',
                                 [DataRequired(), Length(min=16, max=16)])
    password = PasswordField('password', [DataRequired()] + PASSWORD_RULES)


class LoginForm(Form):
    """Payload for logging in by user name or email address."""

    userName = StringField('userName', [Optional()] + USER_NAME_RULES)
    emailAddress = StringField('emailAddress',
                               [Optional(), Email(INVALID_EMAIL)])
    password = PasswordField('password', [DataRequired()] + PASSWORD_RULES)

    def validate(self, extra_validators: Any = None) -> bool:
        """Also require at least one of user name or email address."""
        valid = super(LoginForm, self).validate(extra_validators)
        if not self.userName.data and not self.emailAddress.data:
            self.form_errors.append('userName or emailAddress is required')
            return False
        return valid


class UpdateForm(Form):
    """Payload for updating an account. Every field is optional."""

    userName = StringField('userName', [Optional()] + USER_NAME_RULES)
    emailAddress = StringField('emailAddress',
                               [Optional(), Email(INVALID_EMAIL)])
    password = PasswordField('password', [Optional()] + PASSWORD_RULES)


class AccountNumberQuery(Form):
    """Query string for looking up an account by account number."""

    accountNumber = StringField('accountNumber',
                                [DataRequired(), Length(min=10, max=10)])


class IdentityNumberQuery(Form):
    """Query string for looking up an account by identity number."""

    identityNumber = StringField('identityNumber',
                                 [DataRequired(), Length(min=16, max=16)])


def _error_message(errors: Mapping[Any, List[str]]) -> str:
    messages = []
    for field, field_errors in errors.items():
        for message in field_errors:
            if field is None:
                messages.append(message)
            else:
                messages.append(f'{field} {message}')
    return ', '.join(messages)


def parse(form_class: Type[F], params: Mapping[str, Any]) -> F:
    """
    Validate request parameters with ``form_class``.

    ``params`` may be a decoded JSON object or a query-string
    :class:`MultiDict`. Keys that the form does not declare are ignored.

    Raises
    ------
    :class:`.ValidationFailed`
        With one message per problem, e.g.
        ``identityNumber Field must be exactly 16 characters long.``

    """
    if not isinstance(params, Mapping):
        raise ValidationFailed('Expected a JSON object')
    formdata: MultiDict = MultiDict()
    not_strings = []
    for key, value in params.items():
        if value is None:
            continue
        if not isinstance(value, str):
            not_strings.append(key)
            continue
        formdata.add(key, value)
    form = form_class(formdata)
    type_errors = {key: ['Expected string'] for key in not_strings
                   if key in form}
    if not form.validate() or type_errors:
        errors: Dict[Any, List[str]] = dict(form.errors)
        errors.update(type_errors)
        raise ValidationFailed(_error_message(errors))
    return form


def optional_value(field: Any) -> Any:
    """The field's value, or None if it was not provided."""
    return field.data or None
