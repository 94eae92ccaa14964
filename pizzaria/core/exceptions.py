"""
Erros do painel ao falar com o backend de pedidos.

Nenhum deles atravessa a fronteira da sessão: os services convertem cada
um em notificação para o operador.
"""
from typing import List, Optional


class ErroPainel(Exception):
    """Base de todos os erros tratados pelo painel."""

    mensagem_padrao = "Erro ao processar requisição"

    def __init__(self, mensagem: Optional[str] = None):
        self.mensagem = mensagem or self.mensagem_padrao
        super().__init__(self.mensagem)


class ErroTransporte(ErroPainel):
    """Backend inacessível, conexão recusada ou timeout."""

    mensagem_padrao = "Erro de conexão com o servidor"


class ErroProtocolo(ErroPainel):
    """Resposta HTTP fora da faixa 2xx."""

    def __init__(self, status_code: int, mensagem: Optional[str] = None):
        self.status_code = status_code
        # mensagem do servidor, quando houver; usada verbatim no toast
        self.mensagem_servidor = mensagem
        super().__init__(mensagem or f"Erro HTTP: {status_code}")


class ErroRespostaMalformada(ErroPainel):
    """Corpo da resposta com formato diferente do esperado."""

    mensagem_padrao = "Formato de dados inválido"


class ErroValidacao(ErroPainel):
    """Entrada do usuário inválida; detectado antes de qualquer requisição."""

    def __init__(self, erros: List[str]):
        self.erros = list(erros)
        super().__init__(self.erros[0] if self.erros else "Dados inválidos")
