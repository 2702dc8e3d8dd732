"""
Vault 상수 정의

온체인 수준 정밀도를 위한 상수들:
- Q96: sqrt price 인코딩에 사용 (2^96)
- MIN_TICK / MAX_TICK: 유효 틱 범위
- UINT128_MAX / UINT256_MAX: 오버플로우 검사 경계
"""

# Fixed-point 인코딩 상수
Q96: int = 2 ** 96

# 틱 범위 상수
MIN_TICK: int = -887272
MAX_TICK: int = 887272

# getSqrtRatioAtTick(MIN_TICK), getSqrtRatioAtTick(MAX_TICK)
MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

# uint 최대값
UINT256_MAX: int = 2 ** 256 - 1
UINT128_MAX: int = 2 ** 128 - 1

# 프로토콜 수수료는 basis point 단위 (10000 = 100%)
PROTOCOL_FEE_DENOMINATOR: int = 10_000

# Vault 기본 설정값
DEFAULT_PROTOCOL_FEE_BPS: int = 100
DEFAULT_TICK_WIDTH: int = 600
DEFAULT_SHARE_MULTIPLIER: int = 10 ** 6

# null identity
ZERO_ADDRESS: str = "0x0000000000000000000000000000000000000000"
