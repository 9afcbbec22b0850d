"""Group parameters for the election cryptography.

A parameter set is chosen once per process, before any arithmetic runs.
Two sets are known:
- standard: the 4096-bit p / 256-bit q group used by ElectionGuard
- rfc2409_1024: the 1024-bit Oakley MODP group with q = (p - 1) / 2, g = 2,
  fast enough for experiments and test runs
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import threading
from typing import Dict, Optional

from .errors import ConfigurationError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GroupParameters:
    """Immutable description of the (p, q, g) group.

    Attributes
    - name: short option name used in configuration
    - large_prime: p
    - small_prime: q, with p = q * cofactor + 1
    - cofactor: r = (p - 1) / q
    - generator: g, of order q in Z_p^*
    """

    name: str
    large_prime: int
    small_prime: int
    cofactor: int
    generator: int

    def is_consistent(self) -> bool:
        p, q, g = self.large_prime, self.small_prime, self.generator
        return (
            (p - 1) % q == 0
            and self.cofactor == (p - 1) // q
            and 1 < g < p
            and pow(g, q, p) == 1
        )


_STANDARD_P_DEC = (
    "104438888141315250669175271071662438257996424904738378038423348328395390"
    "797155364353772999312687588390217363401777741636050292608294637794295570"
    "449854209761484182524677358068939838632043974791116089773155107490396724"
    "388342713291881374801626975452234350528589881677721176191239277291448552"
    "115552164104927344620757896193984061946614580685927505347656097329515870"
    "382339571021032931470971523925173655238408084583604877866731893141833842"
    "244389102591188472343308470120777190194459328662497991739135056466263272"
    "370300796422984915475619689061525228653308964318490270692608174414928951"
    "741824915363417834207538187413164601344479689458210687053153580366625457"
    "960263245310374145256979390555190154185617325138504741484039275358558190"
    "995015804625681054267836812127850996052095762473794291460031064660979266"
    "501285839738143575590285131207124810259944230895132703925081889249376742"
    "332966378370919071616202352966921730093978317141580823314682300076691778"
    "928615400604228142373370646290524377485454312723950024587358201266366643"
    "058386277816736954760301634424272959224454460827940599975939109977566774"
    "640163366830869818672117223825500796265856444385892763485041577534883905"
    "202667578569482638693017530314345004657546084387994179194631329932297699"
    "3405829119"
)

_STANDARD_G_DEC = (
    "142451090912947413867511543423235210035430598652619116033406695222181598"
    "980700933278385950451750678973633010477642296403279303330011234010705963"
    "144696031836337904528074284167757179231829495838753818339123708898745721"
    "120869663004986073645017644948119560178811988274003274032520391844488888"
    "776447816105948010537532354533825085439069935712483877494208746097374518"
    "036500217886412499405340814642329371936719295867473393534510217127524062"
    "252762550102810048572330432413325278219116044135824429159938337748902287"
    "054957873572340069327558769726328407605993995140283935423450354331351595"
    "110998777738576226997428162280631069277761478670403366490251527710363612"
    "733293853549273958363302063110725776838926644750707204084472576356068919"
    "201237916025385185165248736642050346981945616730195355642732047440763360"
    "221304539636481143210501739942596206110151894983359661734404119675621757"
    "346067062583350959911408277639422800370631802071729187699217120034000079"
    "238880842966852692332983711436308830112137450822074054799784180899177682"
    "425925571728349211859908769605270133866939099610933022896461932957251352"
    "385950820391334887218000714595033534175742486797285779428636598020160042"
    "831931634708357094056669948924993828909122380984138193201851665800196046"
    "08311466"
)

_OAKLEY_1024_P_HEX = (
    "FFFFFFFFFFFFFFFFC90FDAA22168C234C4C6628B80DC1CD1"
    "29024E088A67CC74020BBEA63B139B22514A08798E3404DD"
    "EF9519B3CD3A431B302B0A6DF25F14374FE1356D6D51C245"
    "E485B576625E7EC6F44C42E9A637ED6B0BFF5CB6F406B7ED"
    "EE386BFB5A899FA5AE9F24117C4B1FE649286651ECE65381"
    "FFFFFFFFFFFFFFFF"
)


def _standard() -> GroupParameters:
    p = int(_STANDARD_P_DEC)
    q = pow(2, 256) - 189
    return GroupParameters(
        name="standard",
        large_prime=p,
        small_prime=q,
        cofactor=(p - 1) // q,
        generator=int(_STANDARD_G_DEC),
    )


def _oakley_1024() -> GroupParameters:
    p = int(_OAKLEY_1024_P_HEX, 16)
    q = (p - 1) // 2
    return GroupParameters(
        name="rfc2409_1024", large_prime=p, small_prime=q, cofactor=2, generator=2
    )


STANDARD = _standard()
RFC2409_1024 = _oakley_1024()

PARAMETER_SETS: Dict[str, GroupParameters] = {
    STANDARD.name: STANDARD,
    RFC2409_1024.name: RFC2409_1024,
}

_lock = threading.Lock()
_active: Optional[GroupParameters] = None


def _lookup(option: str) -> GroupParameters:
    try:
        return PARAMETER_SETS[option.strip().lower()]
    except KeyError:
        raise ConfigurationError(
            f"unknown prime option {option!r}; expected one of {sorted(PARAMETER_SETS)}"
        ) from None


def initialize_parameters(option: str) -> GroupParameters:
    """Fix the process-wide group parameters.

    Calling again with the same option is a no-op. Switching to a different
    set once one is active raises ConfigurationError.
    """
    global _active
    wanted = _lookup(option)
    with _lock:
        if _active is None:
            _active = wanted
            log.info("group parameters initialized: %s", wanted.name)
        elif _active is not wanted:
            raise ConfigurationError(
                f"group parameters already fixed to {_active.name!r}, "
                f"cannot switch to {wanted.name!r}"
            )
        return _active


def get_parameters() -> GroupParameters:
    """Active parameters, initializing from the settings on first use."""
    if _active is not None:
        return _active
    from .config import get_settings

    return initialize_parameters(get_settings().prime_option)
