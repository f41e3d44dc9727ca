"""Shared test fixtures."""
import gzip

import pytest

from config import config
from services.jmdict_parser import (
    JmdictEntry,
    JmdictGlossary,
    JmdictKanji,
    JmdictReading,
    JmdictSense,
)


SAMPLE_JMDICT = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE JMdict [
<!ELEMENT JMdict (entry*)>
<!ELEMENT entry (ent_seq, k_ele*, r_ele+, sense+)>
<!ENTITY v1 "Ichidan verb">
<!ENTITY vt "transitive verb">
<!ENTITY adv "adverb (fukushi)">
<!ENTITY n "noun (common) (futsuumeishi)">
<!ENTITY arch "archaic">
<!ENTITY exp "expressions (phrases, clauses, etc.)">
]>
<JMdict>
<entry>
<ent_seq>1259290</ent_seq>
<k_ele>
<keb>見る</keb>
<ke_pri>ichi1</ke_pri>
<ke_pri>news1</ke_pri>
</k_ele>
<k_ele>
<keb>観る</keb>
</k_ele>
<r_ele>
<reb>みる</reb>
<re_restr>見る</re_restr>
<re_pri>ichi1</re_pri>
</r_ele>
<sense>
<pos>&v1;</pos>
<pos>&vt;</pos>
<gloss xml:lang="eng">to see</gloss>
<gloss>to look</gloss>
</sense>
</entry>
<entry>
<ent_seq>1000580</ent_seq>
<r_ele>
<reb>ああ</reb>
<re_pri>ichi1</re_pri>
</r_ele>
<sense>
<pos>&adv;</pos>
<gloss>like that</gloss>
</sense>
</entry>
<entry>
<ent_seq>2000001</ent_seq>
<r_ele>
<reb>しおこしょう</reb>
</r_ele>
<sense>
<pos>&n;</pos>
<misc>&arch;</misc>
<gloss>salt &amp; pepper</gloss>
</sense>
</entry>
</JMdict>
"""


@pytest.fixture
def sample_xml():
    return SAMPLE_JMDICT


@pytest.fixture
def sample_path(tmp_path):
    path = tmp_path / "JMdict_e.xml"
    path.write_text(SAMPLE_JMDICT, encoding="utf-8")
    return str(path)


@pytest.fixture
def sample_gz_path(tmp_path):
    path = tmp_path / "JMdict_e.gz"
    with gzip.open(path, "wb") as f:
        f.write(SAMPLE_JMDICT.encode("utf-8"))
    return str(path)


@pytest.fixture
def broken_path(tmp_path):
    path = tmp_path / "broken.xml"
    path.write_text("<JMdict><entry><ent_seq>1</ent_seq></JMdict>", encoding="utf-8")
    return str(path)


@pytest.fixture
def non_utf8_path(tmp_path):
    path = tmp_path / "latin1.xml"
    path.write_bytes(b"\xff\xfe<JMdict></JMdict>")
    return str(path)


@pytest.fixture
def corrupt_gz_path(tmp_path):
    path = tmp_path / "bad.gz"
    path.write_bytes(b"not gzip at all")
    return str(path)


@pytest.fixture(autouse=True)
def isolated_log_file(tmp_path, monkeypatch):
    monkeypatch.setattr(config, "LOG_FILE", str(tmp_path / "app.log"))


def make_sense(*glosses, pos=(), restricted_readings=None, restricted_kanji=None,
               fields=(), misc=(), dialects=()):
    return JmdictSense(
        restricted_kanji=restricted_kanji,
        restricted_readings=restricted_readings,
        parts_of_speech=list(pos),
        fields=list(fields),
        misc=list(misc),
        dialects=list(dialects),
        glossary=[JmdictGlossary(content=g) for g in glosses],
    )


@pytest.fixture
def entry_factory():
    """Builds JmdictEntry objects from plain Python values."""
    def build(kanji=(), readings=(), senses=()):
        return JmdictEntry(
            sequence=1,
            kanji=[k if isinstance(k, JmdictKanji) else JmdictKanji(expression=k) for k in kanji],
            readings=[r if isinstance(r, JmdictReading) else JmdictReading(reading=r) for r in readings],
            senses=list(senses),
        )
    return build


@pytest.fixture
def sense_factory():
    return make_sense
