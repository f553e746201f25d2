from flask import request


def payload():
    """Request body as a dict, JSON or form-encoded."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()
