"""Protocol constants and the built-in group."""

from __future__ import annotations

# RFC 3526 2048-bit MODP group. q = (p - 1) / 2 is prime, so the quadratic
# residues form a subgroup of order q; 4 = 2^2 and 9 = 3^2 both generate it.
DEFAULT_P = int(
    """
    FFFFFFFF FFFFFFFF C90FDAA2 2168C234 C4C6628B 80DC1CD1
    29024E08 8A67CC74 020BBEA6 3B139B22 514A0879 8E3404DD
    EF9519B3 CD3A431B 302B0A6D F25F1437 4FE1356D 6D51C245
    E485B576 625E7EC6 F44C42E9 A637ED6B 0BFF5CB6 F406B7ED
    EE386BFB 5A899FA5 AE9F2411 7C4B1FE6 49286651 ECE45B3D
    C2007CB8 A163BF05 98DA4836 1C55D39A 69163FA8 FD24CF5F
    83655D23 DCA3AD96 1C62F356 208552BB 9ED52907 7096966D
    670C354E 4ABC9804 F1746C08 CA18217C 32905E46 2E36CE3B
    E39E772C 180E8603 9B2783A2 EC07A28F B5C55DF0 6F4C52C9
    DE2BCBF6 95581718 3995497C EA956AE5 15D22618 98FA0510
    15728E5A 8AACAA68 FFFFFFFF FFFFFFFF
    """.replace(" ", "").replace("\n", ""),
    16,
)
DEFAULT_Q = (DEFAULT_P - 1) // 2
DEFAULT_G = 4
DEFAULT_H = 9

PARAMETER_FIELDS = ("p", "q", "g", "h")
PARAMETERS_ENV = "CPAUTH_PARAMETERS"

HOST_ENV = "CPAUTH_HOST"
PORT_ENV = "CPAUTH_PORT"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 50051
DEFAULT_URL = f"http://{DEFAULT_HOST}:{DEFAULT_PORT}"

AUTH_ID_BYTES = 16
SESSION_TOKEN_BYTES = 32

PRIMALITY_ROUNDS = 32

# Same bound as CPython's default int/str conversion limit; about 14000 bits.
MAX_INTEGER_DIGITS = 4300

CHALLENGE_TTL = 120  # seconds
MAX_SESSIONS = 10000
