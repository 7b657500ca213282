"""
Preview API - validate pricing configurations and price costs over HTTP.

Stateless: the caller posts the configuration with every request.
"""
import logging
from typing import Any, Optional

from fastapi import FastAPI, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field

from listing_pricer import __version__
from listing_pricer.config.settings import get_settings
from listing_pricer.engine import PriceCalculator, PricingError, default_pricing_config
from listing_pricer.engine.price_sheet import build_price_sheet
from listing_pricer.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

calculator = PriceCalculator(strict_tiers=settings.strict_tiers)

app = FastAPI(
    title="Listing Pricer API",
    description="Validate pricing configurations and preview listing prices",
    version=__version__,
)

# Enable CORS for frontend development
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ConfigRequest(BaseModel):
    """Request body carrying a pricing configuration document."""
    model_config = ConfigDict(populate_by_name=True)

    pricing_config: Optional[Any] = Field(default=None, alias="pricingConfig")


class TiersRequest(BaseModel):
    tiers: Optional[Any] = None


class CalcRequest(ConfigRequest):
    cost: Optional[Any] = None


class SheetRequest(ConfigRequest):
    costs: list[Any] = Field(default_factory=list)


class ValidationResponse(BaseModel):
    """Response model for validation."""
    valid: bool
    errors: list[str]
    warnings: list[str]


def pricing_error(exc: PricingError) -> HTTPException:
    """Map an engine error to a 400 the seller can read."""
    return HTTPException(status_code=400, detail={"error": exc.kind, "message": str(exc)})


@app.get("/")
def root():
    return {"status": "online", "message": "Listing Pricer API Active", "version": __version__}


@app.get("/pricing/defaults")
def get_defaults():
    """Default configuration for a template with no pricing set up."""
    return default_pricing_config()


@app.post("/pricing/validate", response_model=ValidationResponse)
def validate_config(req: ConfigRequest):
    try:
        warnings = calculator.validator.validate(req.pricing_config)
    except PricingError as e:
        return ValidationResponse(valid=False, errors=[str(e)], warnings=[])
    return ValidationResponse(valid=True, errors=[], warnings=warnings)


@app.post("/pricing/profit-tiers/validate", response_model=ValidationResponse)
def validate_tiers(req: TiersRequest):
    warnings = []
    try:
        calculator.validator.validate_profit_tiers(req.tiers, warnings)
    except PricingError as e:
        return ValidationResponse(valid=False, errors=[f"Invalid profit tiers: {e}"], warnings=[])
    return ValidationResponse(valid=True, errors=[], warnings=warnings)


@app.post("/pricing/calculate")
def calculate_price(req: CalcRequest):
    try:
        result = calculator.compute_price(req.pricing_config, req.cost)
    except PricingError as e:
        logger.info("Price calculation rejected: %s", e)
        raise pricing_error(e)

    body = result.to_dict()
    body["trace"] = jsonable_encoder(result.trace)
    return body


@app.post("/pricing/sheet")
def price_sheet(req: SheetRequest):
    try:
        sheet = build_price_sheet(req.pricing_config, req.costs, calculator=calculator)
    except PricingError as e:
        raise pricing_error(e)

    # Flat-profit rows have no tier index (NaN)
    sheet = sheet.astype(object).where(sheet.notna(), None)
    return sheet.to_dict(orient="records")
