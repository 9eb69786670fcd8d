from pydantic import BaseModel


class RegisterRequest(BaseModel):
    telefone: str | int | None = None
    senha: str | None = None
    idade: int | None = None


class LoginRequest(BaseModel):
    telefone: str | int | None = None
    senha: str | None = None


class UserOut(BaseModel):
    id: str
    telefone: str
    saldo: int | None = None
