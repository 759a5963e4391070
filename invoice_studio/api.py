"""FastAPI application exposing calculation, editing, and rendering endpoints."""
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import List

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, ValidationError

from .calculator import calculate_totals_breakdown
from .config import Settings, configure_logging
from .defaults import DEFAULT_BUSINESS_PROFILE, get_template
from .editor import Mutation, apply_mutations, recalculate
from .exceptions import EntryNotFoundError, InvalidMutationError
from .preparer import prepare_template_data
from .renderer import generate_invoice_html, render_template
from .schemas import Invoice, RenderRequest, TotalsBreakdown


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(Settings.load().log_level)
    yield


app = FastAPI(title="Invoice Studio", version="0.1.0", lifespan=lifespan)

# The desktop shell serves its preview from a local origin.
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class MutateRequest(BaseModel):
    invoice: Invoice
    mutations: List[Mutation]


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.post("/calculate", response_model=TotalsBreakdown)
def calculate(invoice: Invoice):
    return calculate_totals_breakdown(invoice)


@app.post("/invoices/mutate", response_model=Invoice)
def mutate(request: MutateRequest):
    try:
        return apply_mutations(request.invoice, request.mutations)
    except EntryNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except (InvalidMutationError, ValidationError) as exc:
        raise HTTPException(status_code=422, detail=str(exc))


@app.post("/render", response_class=HTMLResponse)
def render(request: RenderRequest, settings: Settings = Depends(Settings.load)):
    invoice = recalculate(request.invoice)
    template = request.template or get_template(invoice.template_id)
    business = request.business or DEFAULT_BUSINESS_PROFILE
    if request.document:
        return HTMLResponse(generate_invoice_html(invoice, template, business, date_format=settings.date_format))
    data = prepare_template_data(invoice, template, business, date_format=settings.date_format)
    return HTMLResponse(render_template(template, data))
