"""
Post publishing endpoints.
"""
import logging
import time

from fastapi import APIRouter, Depends, Request

from publisher import PublishPipeline, PublishRequest, PublishResult
from ..dependencies import get_access_token, get_publish_pipeline
from ..logging_utils import log_request
from ..models import PostRequest

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/x")


def _post_response(result: PublishResult) -> dict:
    return {
        "success": True,
        "tweetId": result.post_id,
        "tweetUrl": result.post_url,
        "text": result.text,
    }


async def _publish(http_request: Request, body: PostRequest, request: PublishRequest,
                   access_token: str, pipeline: PublishPipeline) -> dict:
    request_id = http_request.state.request_id
    start_time = time.time()
    log_request(request_id, http_request.url.path, body.model_dump(by_alias=True))

    result = await pipeline.publish(access_token, request)

    logger.info(f"[{request_id}] Published {result.post_id} in {time.time() - start_time:.2f}s")
    return _post_response(result)


@router.post("/post")
async def create_post(
    body: PostRequest,
    http_request: Request,
    access_token: str = Depends(get_access_token),
    pipeline: PublishPipeline = Depends(get_publish_pipeline)
):
    """Publish a post, attaching an image if one is given"""
    request = PublishRequest(text=body.text, image_url=body.image_url, image_data=body.image_base64)
    return await _publish(http_request, body, request, access_token, pipeline)


@router.post("/post/with-media")
async def create_post_with_media(
    body: PostRequest,
    http_request: Request,
    access_token: str = Depends(get_access_token),
    pipeline: PublishPipeline = Depends(get_publish_pipeline)
):
    """Publish a post that must carry an image"""
    request = PublishRequest(
        text=body.text,
        image_url=body.image_url,
        image_data=body.image_base64,
        media_required=True,
    )
    return await _publish(http_request, body, request, access_token, pipeline)
