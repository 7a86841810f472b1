"""Admin translation endpoint."""

from fastapi import APIRouter, Depends

from ..dependencies import get_config_cache, get_translator, require_admin
from ..exceptions import InvalidRequestError, OperationFailedError
from ..models import TranslateRequest, TranslateResponse
from ihub_admin import ConfigCache
from ihub_admin.translation import TranslationError, TranslationSetupError, Translator

router = APIRouter(prefix="/admin", tags=["translate"], dependencies=[Depends(require_admin)])


@router.post("/translate", response_model=TranslateResponse)
async def translate_text(
    request: TranslateRequest,
    cache: ConfigCache = Depends(get_config_cache),
    translator: Translator = Depends(get_translator),
) -> TranslateResponse:
    """Translate a text with the default language model."""
    if not request.text or not request.target:
        raise InvalidRequestError("Missing required fields: text and to")

    try:
        translation = await translator.translate(
            request.text,
            request.target,
            cache.get_models(),
            source=request.source,
        )
    except TranslationSetupError as e:
        raise InvalidRequestError(str(e))
    except TranslationError as e:
        raise OperationFailedError("translate text", e)

    return TranslateResponse(translation=translation)
