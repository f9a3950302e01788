from datetime import date
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, StrictInt


class ApiResponse(BaseModel):
    """Envelope shared by every endpoint."""

    success: bool = True
    message: Optional[str] = None
    data: Optional[Any] = None


class ContactoCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    nome: Optional[str] = Field(default=None, max_length=150)
    email: EmailStr
    mensagem: str = Field(min_length=1, max_length=5000)


class LoginData(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)


class ColaboradorRead(BaseModel):
    id: int
    nome: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class LoginResult(ColaboradorRead):
    access_token: str
    token_type: str = "bearer"
    expires_in: int


class StockItemCreate(BaseModel):
    # JSON true / "5" / 5.0 are not ids or quantities
    produto_id: StrictInt
    quantidade_inicial: StrictInt = Field(gt=0)
    colaborador_id: StrictInt
    data_validade: Optional[date] = None
    campanha_id: Optional[StrictInt] = None


class CategoriaResumo(BaseModel):
    categoria: str
    contagem: int


class EntregaEstado(BaseModel):
    id: int
    estado: str

    model_config = ConfigDict(from_attributes=True)
