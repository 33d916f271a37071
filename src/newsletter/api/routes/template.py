"""Template endpoints for previewing and downloading the local template."""

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse, Response

from ...utils.http_utils import content_disposition
from ..dependencies import get_config, get_template_loader, get_transform_service
from ..models.config import APIConfig
from ..models.responses import ErrorResponse
from ..services.template_loader import TemplateLoader, TemplateNotFoundError
from ..services.transform import TransformService


router = APIRouter()


def _load_template(loader: TemplateLoader, alternative: str) -> str:
    """Load the template or answer 404 pointing at the API alternative."""
    try:
        return loader.load()
    except TemplateNotFoundError:
        raise HTTPException(
            status_code=404,
            detail=ErrorResponse(
                error="Template file not found",
                message=f"Use POST {alternative} endpoint to process HTML content via API"
            ).model_dump()
        )


@router.get("/", response_class=HTMLResponse)
async def view_template(
    loader: TemplateLoader = Depends(get_template_loader),
    transform_service: TransformService = Depends(get_transform_service)
):
    """
    Render the processed template in the browser.

    Reads ``template.html`` from the working directory (or TEMPLATE_PATH).
    """
    html_content = _load_template(loader, "/process")
    return HTMLResponse(transform_service.process_html(html_content))


@router.get("/download")
async def download_template(
    config: APIConfig = Depends(get_config),
    loader: TemplateLoader = Depends(get_template_loader),
    transform_service: TransformService = Depends(get_transform_service)
):
    """Download the processed template as an attachment."""
    html_content = _load_template(loader, "/process-download")
    processed_html = transform_service.process_html(html_content)

    return Response(
        content=processed_html,
        media_type="text/html; charset=UTF-8",
        headers={"Content-Disposition": content_disposition(config.download_filename)}
    )
