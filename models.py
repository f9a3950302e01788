from datetime import date, datetime, timezone
from enum import Enum
from typing import Optional

from sqlmodel import Field, SQLModel


class EstadoEntrega(str, Enum):
    PENDENTE = "pendente"
    ENTREGUE = "entregue"
    CANCELADA = "cancelada"


class Campanha(SQLModel, table=True):
    __tablename__ = "campanhas"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str
    descricao: Optional[str] = None
    data_inicio: Optional[date] = None
    data_fim: Optional[date] = None

    def is_active(self, today: date) -> bool:
        """Started on or before ``today`` and not yet ended."""
        if self.data_inicio is not None and self.data_inicio > today:
            return False
        if self.data_fim is not None and self.data_fim < today:
            return False
        return True


class Produto(SQLModel, table=True):
    __tablename__ = "produtos"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str
    categoria: Optional[str] = None


class Colaborador(SQLModel, table=True):
    __tablename__ = "colaboradores"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: str
    email: str = Field(index=True, unique=True)
    password_hash: str


class StockItem(SQLModel, table=True):
    __tablename__ = "stock_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    produto_id: int = Field(foreign_key="produtos.id")
    quantidade_inicial: int
    quantidade_atual: int
    data_validade: Optional[date] = None
    campanha_id: Optional[int] = Field(default=None, foreign_key="campanhas.id")
    colaborador_id: int = Field(foreign_key="colaboradores.id")


class Beneficiario(SQLModel, table=True):
    __tablename__ = "beneficiarios"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome_completo: str
    num_estudante: str
    curso: str
    estado: str = "ativo"


class Entrega(SQLModel, table=True):
    __tablename__ = "entregas"

    id: Optional[int] = Field(default=None, primary_key=True)
    beneficiario_id: Optional[int] = Field(default=None, foreign_key="beneficiarios.id")
    estado: str = EstadoEntrega.PENDENTE.value
    data_entrega: Optional[date] = None


class MensagemContacto(SQLModel, table=True):
    __tablename__ = "mensagens_contacto"

    id: Optional[int] = Field(default=None, primary_key=True)
    nome: Optional[str] = None
    email: str
    mensagem: str
    criado_em: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
