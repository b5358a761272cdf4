import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional
from urllib.parse import quote

import uvicorn
from fastapi import FastAPI, File, Form, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response
from starlette.concurrency import run_in_threadpool
from starlette.formparsers import MultiPartParser

from signatureapp import __version__
from signatureapp.config import Settings, configure_logging, get_settings
from signatureapp.errors import CredentialError, MissingFile, SignatureAppError
from signatureapp.modules.crypto import Credentials
from signatureapp.modules.provenance import SigningInvoker
from signatureapp.signer_core import sign_image
from signatureapp.ui import render_page
from signatureapp.verifier_core import analyze_bytes

logger = logging.getLogger(__name__)


def load_invoker(settings: Settings) -> SigningInvoker:
    """Load the signing credentials once. A bad setup still starts the server,
    but every sign request will answer with a signing error."""
    try:
        credentials = Credentials.from_settings(settings)
        logger.info("Signing credentials loaded")
    except CredentialError as e:
        logger.error("Signing disabled: %s", e.message)
        credentials = None
    return SigningInvoker(credentials, tsa_url=settings.tsa_url)


def current_invoker(app: FastAPI) -> SigningInvoker:
    if app.state.invoker is None:
        app.state.invoker = load_invoker(app.state.settings)
    return app.state.invoker


def content_disposition(filename: str) -> str:
    filename = filename.replace('"', "'").replace("\r", "").replace("\n", "")
    try:
        filename.encode("latin-1")
        return f'attachment; filename="{filename}"'
    except UnicodeEncodeError:
        fallback = filename.encode("ascii", "replace").decode("ascii").replace("?", "_")
        return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(filename)}"


def keep_uploads_in_memory(limit: int) -> None:
    """Starlette rolls file parts over 1 MB to a temp file; uploads must stay in memory.

    The threshold lives on the parser class and is shared by every app in the
    process, so it is only ever raised.
    """
    # older Starlette releases call the threshold max_file_size
    for attr in ("spool_max_size", "max_file_size"):
        if getattr(MultiPartParser, attr, 0) < limit:
            setattr(MultiPartParser, attr, limit)


def create_app(settings: Optional[Settings] = None, invoker: Optional[SigningInvoker] = None) -> FastAPI:
    settings = settings or get_settings()

    keep_uploads_in_memory(settings.max_upload_bytes)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        current_invoker(app)
        yield

    app = FastAPI(
        title="SignatureApp C2PA API",
        description="Attach and check C2PA content credentials on images",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.invoker = invoker

    # --- CORS CONFIGURATION ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    @app.get("/")
    def read_root():
        """Service description."""
        return {
            "status": "ok",
            "message": "SignatureApp C2PA API is running",
            "version": __version__,
            "endpoints": {
                "health": "GET /health",
                "upload": "POST /upload - Sign an image with C2PA credentials",
                "verify": "POST /verify - Verify C2PA signature in an image",
                "app": "GET /app - Browser client",
            },
        }

    @app.get("/health")
    def health():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/app", response_class=HTMLResponse)
    def client_app():
        return render_page()

    @app.post("/upload")
    async def upload(
        request: Request,
        file: Optional[UploadFile] = File(None),
        author: Optional[str] = Form(None),
        signature: Optional[str] = Form(None),
    ):
        """
        Sign Endpoint.
        1. Checks the file and the author/signature fields.
        2. Converts non-JPEG images to JPEG.
        3. Embeds a signed C2PA manifest.
        4. Returns the signed image as a download.
        Nothing touches the disk.
        """
        try:
            if file is None or not file.filename:
                raise MissingFile("Please upload an image file")

            content = await file.read()
            outcome = await run_in_threadpool(
                sign_image,
                current_invoker(request.app),
                content,
                file.content_type,
                file.filename,
                author,
                signature,
                settings.max_upload_bytes,
            )
            return Response(
                content=outcome.data,
                media_type=outcome.mime_type,
                headers={"Content-Disposition": content_disposition(outcome.download_name)},
            )

        except SignatureAppError as e:
            if e.status_code >= 500:
                logger.error("Sign request failed: %s", e.message)
            return JSONResponse(content={"error": e.message}, status_code=e.status_code)
        except Exception as e:
            logger.exception("Unexpected error while signing")
            return JSONResponse(content={"error": str(e)}, status_code=500)

    @app.post("/verify")
    async def verify(file: Optional[UploadFile] = File(None)):
        """
        Verification Endpoint.
        Always 200 for "signed" and "not signed" alike; 400 only for a missing file.
        """
        if file is None or not file.filename:
            return JSONResponse(content={"error": "Please upload an image file to verify"}, status_code=400)

        try:
            content = await file.read()
            result = await run_in_threadpool(analyze_bytes, content, file.content_type, file.filename)
            return JSONResponse(content=result)

        except Exception as e:
            logger.exception("Verification error")
            return JSONResponse(
                content={"error": str(e), "signed": False, "verified": False},
                status_code=500,
            )

    return app


app = create_app()


def main():
    settings = get_settings()
    configure_logging(settings.log_level)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
