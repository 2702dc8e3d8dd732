"""
Vault Accounting Engine

단일 집중 유동성 포지션에 예치금을 모으고, 유동성 기여도에 비례해 share를 발행하며,
시장 가격을 따라 포지션을 재배치(rerange)합니다.

Share 계산:
    첫 예치:  shares = L_mint * share_multiplier
    이후:     shares = L_mint * total_shares / (L_pool - L_protocol_fee)
    인출:     L_burn = (L_pool - L_protocol_fee) * shares / total_shares

L_protocol_fee는 누적 프로토콜 수수료(protocol_fees_0/1)를 현재 가격과 활성 범위에서
유동성으로 환산한 값입니다. 모든 나눗셈은 내림이며 남은 보유자에게 유리합니다.

deposit / withdraw / rerange는 원자적입니다. 실패하면 Vault 상태와
snapshot()/restore()를 지원하는 모든 협력 객체가 호출 전 상태로 복원됩니다.
"""

import dataclasses
import logging
from contextlib import contextmanager
from typing import Callable, List, Optional, Tuple

from .config import VaultConfig
from .constants import ZERO_ADDRESS
from .errors import (
    AdapterMismatch,
    DivideByZero,
    InsufficientBalance,
    InvalidRange,
    Unauthorized,
    ZeroAddress,
    ZeroLiquidity,
    ZeroShares,
)
from .ledger import ShareLedger, TokenLedger
from .math.full_math import mul_div
from .math.liquidity_amounts import get_amounts_for_liquidity, get_liquidity_for_amounts
from .math.tick_math import get_sqrt_ratio_at_tick, is_aligned
from .pool import PositionAdapter, check_ticks
from .strategy import compute_range
from .types import (
    Deposit,
    DepositResult,
    Rerange,
    RerangeResult,
    VaultEvent,
    VaultState,
    Withdraw,
    WithdrawResult,
)

logger = logging.getLogger(__name__)


def is_null_identity(identity: Optional[str]) -> bool:
    return not identity or identity == ZERO_ADDRESS


def _check_desired(amount0_desired: int, amount1_desired: int) -> None:
    if amount0_desired < 0 or amount1_desired < 0:
        raise ValueError(
            f"예치 수량은 음수일 수 없습니다: ({amount0_desired}, {amount1_desired})"
        )


class Vault:
    """집중 유동성 Vault

    사용법:
        vault = Vault(adapter, shares, token0, token1, config, address="vault")
        result = vault.deposit(10**18, 10**18, "alice", caller="alice")
        vault.withdraw(result.shares, "alice", caller="alice")
        vault.rerange(caller=config.admin)
    """

    def __init__(
        self,
        adapter: PositionAdapter,
        shares: ShareLedger,
        token0: TokenLedger,
        token1: TokenLedger,
        config: VaultConfig,
        address: str = "vault",
        tick_lower: Optional[int] = None,
        tick_upper: Optional[int] = None
    ):
        """
        Args:
            adapter: vault identity(address)에 바인딩된 풀 어댑터
            shares: share 장부
            token0, token1: 토큰 장부
            config: Vault 설정
            address: Vault identity (토큰 보관 계정)
            tick_lower, tick_upper: 초기 범위. 생략하면 현재 틱 기준 정책으로 계산

        Raises:
            InvalidRange: 초기 범위나 tick_width가 틱 간격과 맞지 않는 경우
        """
        self.adapter = adapter
        self.shares = shares
        self.token0 = token0
        self.token1 = token1
        self.config = config
        self.address = address

        spacing = adapter.tick_spacing
        if not is_aligned(config.tick_width, spacing):
            raise InvalidRange(
                f"tick_width {config.tick_width}가 틱 간격 {spacing}의 배수가 아닙니다"
            )

        if tick_lower is None or tick_upper is None:
            _, tick = adapter.current_price()
            tick_lower, tick_upper = compute_range(tick, spacing, config.tick_width)
        else:
            check_ticks(tick_lower, tick_upper, spacing)

        self.state = VaultState(
            tick_lower=tick_lower,
            tick_upper=tick_upper,
            owner=config.owner,
            admin=config.admin,
        )
        self.events: List[VaultEvent] = []
        self._pending: List[VaultEvent] = []
        self._subscribers: List[Callable[[VaultEvent], None]] = []

    # ------------------------------------------------------------------
    # 조회
    # ------------------------------------------------------------------

    @property
    def tick_lower(self) -> int:
        return self.state.tick_lower

    @property
    def tick_upper(self) -> int:
        return self.state.tick_upper

    @property
    def total_shares(self) -> int:
        return self.state.total_shares

    def subscribe(self, callback: Callable[[VaultEvent], None]) -> None:
        """커밋된 이벤트를 받을 콜백 등록"""
        self._subscribers.append(callback)

    def position_liquidity(self) -> int:
        """활성 포지션의 유동성"""
        return self.adapter.position_liquidity(self.state.tick_lower, self.state.tick_upper)

    def protocol_fee_liquidity(self, sqrt_price_x96: Optional[int] = None) -> int:
        """누적 프로토콜 수수료를 현재 가격/활성 범위에서 유동성으로 환산"""
        if sqrt_price_x96 is None:
            sqrt_price_x96, _ = self.adapter.current_price()
        sqrt_lower, sqrt_upper = self._range_sqrt()
        return get_liquidity_for_amounts(
            sqrt_price_x96,
            sqrt_lower,
            sqrt_upper,
            self.state.protocol_fees_0,
            self.state.protocol_fees_1
        )

    def position_amounts(self) -> Tuple[int, int]:
        """활성 포지션 전체를 번했을 때 받을 토큰 수량 (내림)"""
        sqrt_price_x96, _ = self.adapter.current_price()
        sqrt_lower, sqrt_upper = self._range_sqrt()
        return get_amounts_for_liquidity(
            sqrt_price_x96, sqrt_lower, sqrt_upper, self.position_liquidity(), round_up=False
        )

    def preview_deposit(self, amount0_desired: int, amount1_desired: int) -> int:
        """deposit 시 발행될 share 수 (유동성이 0이면 0)"""
        _check_desired(amount0_desired, amount1_desired)
        sqrt_price_x96, _ = self.adapter.current_price()
        sqrt_lower, sqrt_upper = self._range_sqrt()
        liquidity = get_liquidity_for_amounts(
            sqrt_price_x96, sqrt_lower, sqrt_upper, amount0_desired, amount1_desired
        )
        if liquidity == 0:
            return 0
        return self._shares_for_liquidity(
            liquidity,
            self.position_liquidity(),
            self.protocol_fee_liquidity(sqrt_price_x96)
        )

    def preview_withdraw(self, shares: int) -> Tuple[int, int]:
        """withdraw 시 받을 토큰 수량"""
        sqrt_price_x96, _ = self.adapter.current_price()
        liquidity = self._liquidity_for_shares(shares, sqrt_price_x96)
        sqrt_lower, sqrt_upper = self._range_sqrt()
        return get_amounts_for_liquidity(
            sqrt_price_x96, sqrt_lower, sqrt_upper, liquidity, round_up=False
        )

    # ------------------------------------------------------------------
    # 상태 전이
    # ------------------------------------------------------------------

    def deposit(
        self,
        amount0_desired: int,
        amount1_desired: int,
        beneficiary: str,
        *,
        caller: str
    ) -> DepositResult:
        """토큰을 예치하고 beneficiary에게 share 발행

        Returns:
            DepositResult(shares, amount0, amount1) - amount는 실제로 가져온 수량

        Raises:
            ValueError: 예치 수량이 음수
            ZeroAddress: beneficiary가 null identity
            ZeroLiquidity: 현재 가격/범위에서 유동성이 0
            DivideByZero: total_shares > 0인데 순유동성이 0 이하 (불변식 위반)
            InsufficientBalance: caller의 토큰 잔액 부족
        """
        _check_desired(amount0_desired, amount1_desired)
        if is_null_identity(beneficiary):
            raise ZeroAddress()

        with self._atomic("deposit"):
            sqrt_price_x96, _ = self.adapter.current_price()
            sqrt_lower, sqrt_upper = self._range_sqrt()

            liquidity_before = self.position_liquidity()
            fee_liquidity_before = self.protocol_fee_liquidity(sqrt_price_x96)

            liquidity = get_liquidity_for_amounts(
                sqrt_price_x96, sqrt_lower, sqrt_upper, amount0_desired, amount1_desired
            )
            if liquidity == 0:
                raise ZeroLiquidity(
                    f"예치 수량 ({amount0_desired}, {amount1_desired})으로 유동성을 만들 수 없습니다"
                )

            shares = self._shares_for_liquidity(liquidity, liquidity_before, fee_liquidity_before)
            amount0, amount1 = self._deploy(sqrt_price_x96, liquidity, payer=caller)

            self.shares.mint(beneficiary, shares)
            self.state.total_shares += shares
            self._emit(Deposit(caller, beneficiary, shares, amount0, amount1))

        logger.info(
            f"deposit: caller={caller} beneficiary={beneficiary} liquidity={liquidity} "
            f"shares={shares} amount0={amount0} amount1={amount1}"
        )
        return DepositResult(shares, amount0, amount1)

    def withdraw(self, shares: int, beneficiary: str, *, caller: str) -> WithdrawResult:
        """caller의 share를 소각하고 비례 유동성을 번해 beneficiary에게 전송

        Raises:
            ZeroShares: shares가 0 이하
            ZeroAddress: beneficiary가 null identity
            ZeroLiquidity: shares가 너무 작아 번할 유동성이 0
            InsufficientBalance: caller의 share 부족
        """
        if shares <= 0:
            raise ZeroShares()
        if is_null_identity(beneficiary):
            raise ZeroAddress()

        with self._atomic("withdraw"):
            sqrt_price_x96, _ = self.adapter.current_price()
            tick_lower, tick_upper = self.state.tick_lower, self.state.tick_upper

            liquidity = self._liquidity_for_shares(shares, sqrt_price_x96)
            if liquidity == 0:
                raise ZeroLiquidity(f"share {shares}에 해당하는 유동성이 0입니다")

            burned0, burned1 = self.adapter.burn(tick_lower, tick_upper, liquidity)
            amount0, amount1 = self.adapter.collect(tick_lower, tick_upper, burned0, burned1)

            self.shares.burn(caller, shares)
            if amount0 > 0:
                self.token0.transfer(self.address, beneficiary, amount0)
            if amount1 > 0:
                self.token1.transfer(self.address, beneficiary, amount1)

            self.state.total_shares -= shares
            self._emit(Withdraw(caller, beneficiary, shares, amount0, amount1))

        logger.info(
            f"withdraw: caller={caller} beneficiary={beneficiary} liquidity={liquidity} "
            f"shares={shares} amount0={amount0} amount1={amount1}"
        )
        return WithdrawResult(amount0, amount1)

    def rerange(self, *, caller: str) -> RerangeResult:
        """포지션 전체를 회수하고 현재 가격 중심의 새 범위에 재배치

        1. 기존 포지션 유동성 전부 번 + 수수료 포함 전체 collect
        2. 수수료(collect - 원금)에서 프로토콜 몫을 적립
        3. 현재 틱 기준 대칭 범위 계산
        4. Vault 잔액에서 누적 프로토콜 수수료를 뺀 수량을 새 범위에 민트

        4단계는 collect 수량이 아니라 잔액 기준이므로 이전 재배치의 민트 반올림
        dust도 함께 재배치됩니다. 이번 민트에서 남는 dust는 다음 rerange까지 Vault에 남습니다.

        Raises:
            Unauthorized: caller가 owner/admin이 아닌 경우
            InvalidRange: 새 범위가 정렬/순서 조건을 만족하지 않는 경우
        """
        if caller not in (self.state.owner, self.state.admin):
            raise Unauthorized(f"{caller}는 rerange 권한이 없습니다")

        with self._atomic("rerange"):
            old_lower, old_upper = self.state.tick_lower, self.state.tick_upper

            liquidity = self.position_liquidity()
            burned0, burned1 = (0, 0)
            if liquidity > 0:
                burned0, burned1 = self.adapter.burn(old_lower, old_upper, liquidity)
            collected0, collected1 = self.adapter.collect(old_lower, old_upper)

            skim0 = self.config.protocol_fee(max(collected0 - burned0, 0))
            skim1 = self.config.protocol_fee(max(collected1 - burned1, 0))
            self.state.protocol_fees_0 += skim0
            self.state.protocol_fees_1 += skim1

            sqrt_price_x96, tick = self.adapter.current_price()
            tick_lower, tick_upper = compute_range(
                tick, self.adapter.tick_spacing, self.config.tick_width
            )
            self.state.tick_lower, self.state.tick_upper = tick_lower, tick_upper

            available0 = max(self.token0.balance_of(self.address) - self.state.protocol_fees_0, 0)
            available1 = max(self.token1.balance_of(self.address) - self.state.protocol_fees_1, 0)

            sqrt_lower, sqrt_upper = self._range_sqrt()
            new_liquidity = get_liquidity_for_amounts(
                sqrt_price_x96, sqrt_lower, sqrt_upper, available0, available1
            )
            amount0 = amount1 = 0
            if new_liquidity > 0:
                amount0, amount1 = self._deploy(sqrt_price_x96, new_liquidity)

            self._emit(Rerange(tick_lower, tick_upper, amount0, amount1))

        logger.info(
            f"rerange: [{old_lower}, {old_upper}] -> [{tick_lower}, {tick_upper}] "
            f"collected=({collected0}, {collected1}) protocol_fee=({skim0}, {skim1}) "
            f"deployed=({amount0}, {amount1})"
        )
        return RerangeResult(tick_lower, tick_upper, amount0, amount1)

    # ------------------------------------------------------------------
    # 내부
    # ------------------------------------------------------------------

    def _range_sqrt(self) -> Tuple[int, int]:
        return (
            get_sqrt_ratio_at_tick(self.state.tick_lower),
            get_sqrt_ratio_at_tick(self.state.tick_upper),
        )

    def _shares_for_liquidity(
        self,
        liquidity: int,
        liquidity_before: int,
        fee_liquidity_before: int
    ) -> int:
        total_shares = self.state.total_shares
        if total_shares == 0:
            return liquidity * self.config.share_multiplier

        net_liquidity = liquidity_before - fee_liquidity_before
        if net_liquidity <= 0:
            raise DivideByZero(
                f"total_shares={total_shares}인데 순유동성이 {net_liquidity}입니다"
            )
        return mul_div(liquidity, total_shares, net_liquidity)

    def _liquidity_for_shares(self, shares: int, sqrt_price_x96: int) -> int:
        total_shares = self.state.total_shares
        if shares > total_shares:
            raise InsufficientBalance(f"shares {shares} > total_shares {total_shares}")

        net_liquidity = self.position_liquidity() - self.protocol_fee_liquidity(sqrt_price_x96)
        if net_liquidity <= 0:
            return 0
        return mul_div(net_liquidity, shares, total_shares)

    def _deploy(self, sqrt_price_x96: int, liquidity: int, payer: Optional[str] = None) -> Tuple[int, int]:
        """활성 범위에 유동성 민트

        payer가 주어지면 필요한 토큰(올림)을 payer에게서 먼저 가져옵니다.
        """
        tick_lower, tick_upper = self.state.tick_lower, self.state.tick_upper
        sqrt_lower, sqrt_upper = self._range_sqrt()
        amount0, amount1 = get_amounts_for_liquidity(
            sqrt_price_x96, sqrt_lower, sqrt_upper, liquidity, round_up=True
        )

        if payer is not None:
            if amount0 > 0:
                self.token0.transfer(payer, self.address, amount0)
            if amount1 > 0:
                self.token1.transfer(payer, self.address, amount1)

        consumed0, consumed1 = self.adapter.mint(tick_lower, tick_upper, liquidity)
        if consumed0 > amount0 or consumed1 > amount1:
            raise AdapterMismatch(
                f"mint가 ({consumed0}, {consumed1})를 소비했지만 ({amount0}, {amount1})만 준비되었습니다"
            )

        if payer is not None:
            return amount0, amount1
        return consumed0, consumed1

    def _emit(self, event: VaultEvent) -> None:
        self._pending.append(event)

    @contextmanager
    def _atomic(self, operation: str):
        participants = [
            p for p in (self.adapter, self.token0, self.token1, self.shares)
            if hasattr(p, "snapshot") and hasattr(p, "restore")
        ]
        snapshots = [(p, p.snapshot()) for p in participants]
        state = dataclasses.replace(self.state)
        self._pending = []

        try:
            yield
        except Exception as e:
            logger.warning(f"{operation} aborted ({type(e).__name__}: {e}); restoring state")
            for participant, snapshot in reversed(snapshots):
                participant.restore(snapshot)
            self.state = state
            self._pending = []
            raise

        committed, self._pending = self._pending, []
        self.events.extend(committed)
        for event in committed:
            self._notify(event)

    def _notify(self, event: VaultEvent) -> None:
        # 커밋 이후이므로 구독자 실패가 연산 결과를 바꾸지 않음
        for callback in self._subscribers:
            try:
                callback(event)
            except Exception:
                logger.exception(f"subscriber {callback!r} failed on {type(event).__name__}")
