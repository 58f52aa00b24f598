"""Constants shared by esisref tests."""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent / "fixtures"
FAKE_NSGMLS = FIXTURES_DIR / "fake_nsgmls.py"

SAMPLE_SGML = """\
<!DOCTYPE manual SYSTEM "manual.dtd">
<manual>
<section id="intro">
<para>See <xref linkend="setup"> for details.
</section>
<section id=setup>
<para id="p1">Install it.
</section>
</manual>
"""

# What nsgmls -oline -oid prints for SAMPLE_SGML (general names upper-cased)
SAMPLE_ESIS = """\
L1 manual.sgml
(MANUAL
L3
AID ID INTRO
(SECTION
(PARA
-See 
ALINKEND IDREF SETUP
(XREF
)XREF
- for details.
)PARA
)SECTION
L6
AID ID SETUP
(SECTION
AID ID P1
(PARA
-Install it.
)PARA
)SECTION
)MANUAL
C
"""
