from flask import current_app, jsonify
from werkzeug.exceptions import BadRequest
from apihub.domain.errors import HTTP_STATUS_BY_KIND, ErrorKind, HubError


def register_error_handlers(app):
    @app.errorhandler(HubError)
    def handle_hub_error(error):
        status = HTTP_STATUS_BY_KIND.get(error.kind, 500)
        if error.kind in (ErrorKind.STORAGE_FAILURE, ErrorKind.COMMAND_APPLICATION):
            current_app.logger.error("%s: %s", error.kind.value, error, exc_info=error)
        response = jsonify(error.to_dict())
        response.status_code = status
        return response

    @app.errorhandler(ValueError)
    def handle_value_error(error):
        response = jsonify({
            "error": "invalid_request",
            "message": str(error)
        })
        response.status_code = 400
        return response

    @app.errorhandler(BadRequest)
    def handle_bad_request(error):
        response = jsonify({
            "error": "invalid_request",
            "message": error.description
        })
        response.status_code = 400
        return response
