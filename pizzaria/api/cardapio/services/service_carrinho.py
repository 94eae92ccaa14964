from __future__ import annotations

import json
import uuid
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from pizzaria.api.cardapio.contracts.armazenamento_contract import IArmazenamentoLocal
from pizzaria.api.cardapio.schemas.schema_carrinho import (
    CarrinhoResponse,
    CategoriaCatalogo,
    ComboCatalogo,
    ItemCarrinho,
)
from pizzaria.utils.formatacao import formatar_moeda
from pizzaria.utils.logger import logger

CHAVE_CARRINHO = "cart"
CHAVE_ULTIMO_PEDIDO = "lastOrder"


def combos_do_catalogo(categorias: Iterable[Dict[str, Any]]) -> List[ComboCatalogo]:
    """Achata o retorno de GET /categories ([{..., combos: [...]}]) em combos ativos."""
    combos: List[ComboCatalogo] = []
    for bruto in categorias:
        try:
            categoria = CategoriaCatalogo.model_validate(bruto)
        except ValidationError as e:
            logger.warning(f"[Carrinho] Categoria inválida ignorada: {e.error_count()} erro(s)")
            continue
        combos.extend(c for c in categoria.combos if c.ativo)
    return combos


class CarrinhoService:
    """
    Carrinho do cliente guardado na chave `cart`.

    Aceita dois formatos na leitura:
    - array de linhas (`ItemCarrinho`), o formato atual;
    - mapa legado `{comboId: quantidade}`, resolvido contra o catálogo.
    Toda gravação usa o formato de array.
    """

    def __init__(self, armazenamento: IArmazenamentoLocal):
        self.armazenamento = armazenamento
        self.itens: List[ItemCarrinho] = []
        self.catalogo: Dict[str, ComboCatalogo] = {}

    # ------------------------------------------------------------------ #
    # Leitura
    # ------------------------------------------------------------------ #
    def carregar(self, catalogo: Iterable[ComboCatalogo] = ()) -> List[ItemCarrinho]:
        self.catalogo = {c.id: c for c in catalogo}
        self.itens = []

        bruto = self.armazenamento.get(CHAVE_CARRINHO)
        if not bruto:
            return self.itens
        try:
            dados = json.loads(bruto)
        except ValueError:
            logger.error("[Carrinho] Conteúdo de 'cart' não é JSON válido; carrinho vazio")
            return self.itens

        if isinstance(dados, list):
            self.itens = self._ler_array(dados)
        elif isinstance(dados, dict):
            self.itens = self._ler_mapa_legado(dados)
            self._persistir()
        else:
            logger.error(f"[Carrinho] Formato inesperado em 'cart': {type(dados).__name__}")
        return self.itens

    @staticmethod
    def _ler_array(dados: List[Any]) -> List[ItemCarrinho]:
        itens = []
        for posicao, bruto in enumerate(dados, start=1):
            try:
                itens.append(ItemCarrinho.model_validate(bruto))
            except ValidationError:
                logger.warning(f"[Carrinho] Item {posicao} inválido descartado")
        return itens

    def _ler_mapa_legado(self, dados: Dict[str, Any]) -> List[ItemCarrinho]:
        itens = []
        for combo_id, quantidade in dados.items():
            combo = self.catalogo.get(combo_id)
            if combo is None:
                logger.warning(f"[Carrinho] Combo {combo_id} do carrinho legado não existe no catálogo; descartado")
                continue
            try:
                quantidade = int(quantidade)
            except (TypeError, ValueError):
                quantidade = 0
            if quantidade <= 0:
                continue
            itens.append(ItemCarrinho(id=uuid.uuid4().hex, combo=combo, quantidade=quantidade))
        logger.info(f"[Carrinho] Carrinho legado migrado: {len(itens)} item(ns)")
        return itens

    # ------------------------------------------------------------------ #
    # Mutações
    # ------------------------------------------------------------------ #
    def _linha_simples(self, combo_id: str) -> Optional[ItemCarrinho]:
        for item in self.itens:
            if item.combo.id == combo_id and not item.observacoes and not item.borda_recheada:
                return item
        return None

    def adicionar(self, combo_id: str) -> ItemCarrinho:
        combo = self.catalogo.get(combo_id)
        if combo is None:
            raise KeyError(combo_id)

        item = self._linha_simples(combo_id)
        if item is None:
            item = ItemCarrinho(id=uuid.uuid4().hex, combo=combo, quantidade=1)
            self.itens.append(item)
        else:
            item.quantidade += 1
            item.preco_total = None
        self._persistir()
        return item

    def remover(self, combo_id: str) -> bool:
        """Remove uma unidade do combo; a linha some quando chega a zero."""
        for item in self.itens:
            if item.combo.id != combo_id:
                continue
            if item.quantidade > 1:
                item.quantidade -= 1
                item.preco_total = None
            else:
                self.itens.remove(item)
            self._persistir()
            return True
        return False

    def limpar(self) -> None:
        self.itens = []
        self.armazenamento.remove(CHAVE_CARRINHO)

    def _persistir(self) -> None:
        conteudo = [item.model_dump(by_alias=True, mode="json") for item in self.itens]
        self.armazenamento.set(CHAVE_CARRINHO, json.dumps(conteudo, ensure_ascii=False))

    # ------------------------------------------------------------------ #
    # Totais
    # ------------------------------------------------------------------ #
    def total(self) -> float:
        return round(sum(item.subtotal for item in self.itens), 2)

    def quantidade_itens(self) -> int:
        return sum(item.quantidade for item in self.itens)

    def resumo(self) -> CarrinhoResponse:
        total = self.total()
        return CarrinhoResponse(
            itens=list(self.itens),
            quantidade_itens=self.quantidade_itens(),
            total=total,
            total_formatado=formatar_moeda(total),
        )
