import re
from datetime import datetime
from typing import Optional


def formatar_moeda(valor: Optional[float]) -> str:
    """Formata em Real: 1234.5 -> 'R$ 1.234,50'."""
    valor = float(valor or 0)
    sinal = "-" if valor < 0 else ""
    texto = f"{abs(valor):,.2f}".replace(",", "_").replace(".", ",").replace("_", ".")
    return f"{sinal}R$ {texto}"


def formatar_hora(data: Optional[datetime]) -> str:
    return data.strftime("%H:%M") if data else ""


def formatar_data_hora(data: Optional[datetime]) -> str:
    return data.strftime("%d/%m/%Y %H:%M:%S") if data else ""


# ---------------------------------------------------------------------------
# Máscaras de dados sensíveis exibidos no painel
# ---------------------------------------------------------------------------
def mascarar_email(email: Optional[str]) -> Optional[str]:
    """admin@centraldaspizzas.com -> ad***@centraldaspizzas.com"""
    if not email or "@" not in email:
        return email
    local, dominio = email.split("@", 1)
    if len(local) <= 2:
        return f"{local[:1]}***@{dominio}"
    return f"{local[:2]}***@{dominio}"


def mascarar_id(valor: Optional[str]) -> str:
    """abc123def456 -> abc***456"""
    if not valor or len(valor) <= 6:
        return "***"
    return f"{valor[:3]}***{valor[-3:]}"


def mascarar_nome(nome: Optional[str]) -> str:
    """João Silva -> João S***"""
    if not nome or not nome.strip():
        return ""
    partes = nome.strip().split()
    if len(partes) == 1:
        return f"{partes[0][:3]}***"
    return f"{partes[0]} {partes[-1][0]}***"


def mascarar_telefone(telefone: Optional[str]) -> str:
    """(11) 99999-9999 -> (11) 9****-9999"""
    if not telefone:
        return ""
    digitos = re.sub(r"\D", "", telefone)
    if len(digitos) <= 4:
        return "***"
    return f"({digitos[:2]}) {digitos[2:3]}****-{digitos[-4:]}"
