from fastapi import APIRouter, status
from sqlmodel import select

from db import SessionDep
from exceptions import NotFoundError
from logging_config import get_logger
from models import Beneficiario, Entrega, EstadoEntrega, StockItem
from schemas import ApiResponse, EntregaEstado, StockItemCreate
from .auth import CurrentColaboradorDep

router = APIRouter(tags=["admin"])
logger = get_logger("admin")


@router.get("/beneficiarios", response_model=ApiResponse)
def list_beneficiarios(session: SessionDep, current: CurrentColaboradorDep):
    """
    List every beneficiary, ordered by name.
    """
    beneficiarios = session.exec(
        select(Beneficiario).order_by(Beneficiario.nome_completo)
    ).all()
    return ApiResponse(data=[b.model_dump() for b in beneficiarios])


@router.post("/stock", status_code=status.HTTP_201_CREATED, response_model=ApiResponse)
def create_stock_item(
    item_in: StockItemCreate,
    session: SessionDep,
    current: CurrentColaboradorDep,
):
    """
    Add a stock item. The current quantity starts equal to the initial one.
    """
    item = StockItem(
        produto_id=item_in.produto_id,
        quantidade_inicial=item_in.quantidade_inicial,
        quantidade_atual=item_in.quantidade_inicial,
        data_validade=item_in.data_validade,
        campanha_id=item_in.campanha_id,
        colaborador_id=item_in.colaborador_id,
    )

    session.add(item)
    session.commit()
    session.refresh(item)

    logger.info(
        f"Stock item {item.id} added by colaborador {current.id} "
        f"(produto {item.produto_id}, quantidade {item.quantidade_inicial})"
    )
    return ApiResponse(message="Item adicionado ao stock", data={"id": item.id})


@router.put("/entregas/{entrega_id}/concluir", response_model=ApiResponse)
def complete_entrega(entrega_id: int, session: SessionDep, current: CurrentColaboradorDep):
    """
    Mark a delivery as delivered. Completing it again rewrites the same state.
    """
    entrega = session.get(Entrega, entrega_id)
    if entrega is None:
        raise NotFoundError("Entrega não encontrada")

    if entrega.estado == EstadoEntrega.ENTREGUE.value:
        logger.info(f"Entrega {entrega_id} was already delivered")

    entrega.estado = EstadoEntrega.ENTREGUE.value
    session.add(entrega)
    session.commit()
    session.refresh(entrega)

    logger.info(f"Entrega {entrega_id} completed by colaborador {current.id}")
    return ApiResponse(
        message="Entrega concluída com sucesso",
        data=EntregaEstado.model_validate(entrega).model_dump(),
    )
