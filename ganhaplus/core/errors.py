"""
Wallet error taxonomy.
Services raise these; the API layer renders them as {"sucesso": false, "erro": ...}.
"""


class WalletError(Exception):
    status_code = 500
    default_message = "Erro interno"

    def __init__(self, message: str | None = None, status_code: int | None = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(WalletError):
    status_code = 400
    default_message = "Dados incompletos"


class AuthError(WalletError):
    """Missing, malformed or expired credential. Never says which."""

    status_code = 401
    default_message = "Credenciais inválidas"


class AuthorizationError(WalletError):
    """Valid credential, wrong subject."""

    status_code = 403
    default_message = "Acesso não autorizado"


class ConflictError(WalletError):
    status_code = 409
    default_message = "Registo duplicado"


class RateLimitError(WalletError):
    status_code = 429
    default_message = "Limite atingido"


class InsufficientFundsError(WalletError):
    status_code = 400
    default_message = "Saldo insuficiente"


class NotFoundError(WalletError):
    status_code = 404
    default_message = "Não encontrado"


class InternalError(WalletError):
    status_code = 500
    default_message = "Erro interno"
