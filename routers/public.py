from collections.abc import Iterable
from datetime import date
from typing import Dict, List, Optional

from fastapi import APIRouter, status
from sqlmodel import select

from db import SessionDep
from logging_config import get_logger
from models import Campanha, MensagemContacto, Produto, StockItem
from schemas import ApiResponse, CategoriaResumo, ContactoCreate

router = APIRouter(tags=["public"])
logger = get_logger("public")

SEM_CATEGORIA = "Sem categoria"


def summarize_categories(categorias: Iterable[Optional[str]]) -> List[CategoriaResumo]:
    """
    Count rows per category, keeping the order in which each category first
    appears. Quantities never enter the result, only the number of rows.
    """
    counts: Dict[str, int] = {}
    for categoria in categorias:
        key = categoria or SEM_CATEGORIA
        counts[key] = counts.get(key, 0) + 1
    return [CategoriaResumo(categoria=k, contagem=v) for k, v in counts.items()]


@router.get("/campanhas", response_model=ApiResponse)
def list_campanhas(session: SessionDep, ativas: bool = False):
    """
    List campaigns in insertion order, optionally only those active today.
    """
    campanhas = session.exec(select(Campanha).order_by(Campanha.id)).all()

    if ativas:
        today = date.today()
        campanhas = [c for c in campanhas if c.is_active(today)]

    return ApiResponse(data=[c.model_dump() for c in campanhas])


@router.get("/stock-summary", response_model=ApiResponse)
def stock_summary(session: SessionDep):
    """
    Category histogram over stock items still holding units.
    Each entry is {categoria, contagem}: contagem is the number of stock
    items in the category, not the units they hold.
    """
    rows = session.exec(
        select(Produto.categoria)
        .join(StockItem, StockItem.produto_id == Produto.id)
        .where(StockItem.quantidade_atual > 0)
        .order_by(StockItem.id)
    ).all()

    resumo = summarize_categories(rows)
    return ApiResponse(data=[r.model_dump() for r in resumo])


@router.post("/contacto", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
def create_contacto(contacto: ContactoCreate, session: SessionDep):
    """
    Store a message from the donation contact form.
    """
    mensagem = MensagemContacto(
        nome=contacto.nome or None,
        email=str(contacto.email),
        mensagem=contacto.mensagem,
    )
    session.add(mensagem)
    session.commit()
    session.refresh(mensagem)

    logger.info(f"Contact message {mensagem.id} received")
    return ApiResponse(message="Mensagem enviada com sucesso", data={"id": mensagem.id})
