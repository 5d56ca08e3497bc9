"""
MODULE_DESCRIPTION: API Helper Functions - Response Envelope and Debug Tracebacks

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Every route of the Wellness Sessions API answers with the same JSON envelope:

    success:  {"success": true, ...data, "message"?}
    failure:  {"success": false, "kind", "code", "message", "errors"?}

The envelope shapes live in editor.result (Ok / Err) so the HTTP client parses
exactly what the server renders. This module turns those values into FastAPI
JSONResponse objects, and keeps the debug helper that attaches a traceback to
500 responses when DEBUG_TRACEBACK=1.

===================================================================================
HELPER FUNCTIONS
===================================================================================

    ok_response(data=None, message=None, status_code=200)
    error_response(err)
    traceback_json_response(e, status_code=500, run_id=None)

Security Note:
    DEBUG_TRACEBACK exposes file paths and code structure. Never enable it in
    production deployments.
"""

# API helper functions for error handling and response formatting
import os
import traceback
from typing import Any, Dict, Optional

from fastapi.responses import JSONResponse

from editor.result import Err, ErrorKind, Ok


# ==============================================================================
# ENVELOPE HELPERS
# ==============================================================================


def ok_response(
    data: Optional[Dict[str, Any]] = None,
    message: Optional[str] = None,
    status_code: int = 200,
) -> JSONResponse:
    """Render a success envelope."""
    return JSONResponse(
        status_code=status_code,
        content=Ok(data=data or {}, message=message).to_payload(),
    )


def error_response(err: Err) -> JSONResponse:
    """Render a failure envelope with the status code of its kind."""
    return JSONResponse(status_code=err.status, content=err.to_payload())


# ==============================================================================
# ERROR RESPONSE HELPERS
# ==============================================================================


def traceback_json_response(e, status_code=500, run_id=None):
    """Create a failure envelope with traceback information when in debug mode.

    Returns None unless DEBUG_TRACEBACK=1, so the caller falls back to a safe
    production response.

    Args:
        e: The exception that occurred
        status_code: HTTP status code for the response (default: 500)
        run_id: Optional id to include in the response for error correlation
    """
    # Only include tracebacks when DEBUG_TRACEBACK=1 (development mode)
    if os.environ.get("DEBUG_TRACEBACK") == "1":
        tb_str = "".join(traceback.format_exception(type(e), e, e.__traceback__))

        response_content = Err(ErrorKind.from_status(status_code), str(e)).to_payload()
        response_content["traceback"] = tb_str

        if run_id:
            response_content["run_id"] = run_id

        return JSONResponse(
            status_code=status_code,
            content=response_content,
        )

    # Debug mode disabled - caller handles fallback
    return None
