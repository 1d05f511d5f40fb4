from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from amq_admin.core.exceptions import AdminError, ConfirmationDeclined


def _problem(status: int, title: str, detail: str):
    return {"type": "about:blank", "status": status, "title": title, "detail": detail}


def install_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(AdminError)
    async def admin_error_handler(_: Request, exc: AdminError):
        return JSONResponse(
            status_code=exc.status_code,
            content=_problem(exc.status_code, exc.title, exc.message),
            media_type="application/problem+json",
        )

    @app.exception_handler(ConfirmationDeclined)
    async def declined_handler(_: Request, exc: ConfirmationDeclined):
        detail = "Confirmation required, retry with force=true"
        return JSONResponse(status_code=409, content=_problem(409, "Conflict", detail))

    # Catch-all
    @app.exception_handler(Exception)
    async def unhandled(_: Request, exc: Exception):
        return JSONResponse(status_code=500, content=_problem(500, "Internal Server Error", str(exc)))
