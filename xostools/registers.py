"""Register numbering of the XSM machine as seen by the SPL compiler."""

R0 = 0
R15 = 15
R19 = 19

P0 = 20
P3 = 23

BP_REG = 24
IP_REG = 25
SP_REG = 26
PTBR_REG = 27
PTLR_REG = 28
EIP_REG = 29
EPN_REG = 30
EC_REG = 31
EMA_REG = 32

NO_GEN_REG = 20
NO_PORTS = 4
NO_SPECIAL_REG = 9
NUM_REGS = NO_GEN_REG + NO_SPECIAL_REG + NO_PORTS

# Registers from R16 upwards are reserved for the compiler's own use.
C_REG_BASE = 16

_SPECIAL_NAMES = {
    BP_REG: "BP",
    SP_REG: "SP",
    IP_REG: "IP",
    PTBR_REG: "PTBR",
    PTLR_REG: "PTLR",
    EIP_REG: "EIP",
    EPN_REG: "EPN",
    EC_REG: "EC",
    EMA_REG: "EMA",
}


def is_allowed_register(value: int) -> bool:
    """Return True if a program may name this register (R0 to R15)."""
    return R0 <= value < R0 + C_REG_BASE


def register_name(value: int) -> str:
    """Return the assembly name of a register number."""
    if R0 <= value <= R15:
        return f"R{value - R0}"
    if P0 <= value <= P3:
        return f"P{value - P0}"
    try:
        return _SPECIAL_NAMES[value]
    except KeyError:
        raise ValueError(f"register {value} has no assembly name") from None