from flask import request
from werkzeug.datastructures import ImmutableMultiDict

from ..errors import ValidationError


def json_body():
    body = request.get_json(silent=True)
    return body if isinstance(body, dict) else {}


def load(form_cls, source=None):
    """Bind ``form_cls`` to the JSON body (or ``source``) and validate it.

    Null values count as absent so optional fields stay optional.
    """
    data = json_body() if source is None else source
    formdata = ImmutableMultiDict({k: v for k, v in data.items() if v is not None})
    form = form_cls(formdata=formdata)
    if not form.validate():
        raise ValidationError("Invalid input.", fields=form.errors)
    return form


def submitted(form, source=None):
    """Values of the fields the client actually sent, for partial updates."""
    data = json_body() if source is None else source
    return {field.name: field.data for field in form if data.get(field.name) is not None}
