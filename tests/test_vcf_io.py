"""Reader/writer tests against real VCF files, plus in-process app runs."""

import logging
from pathlib import Path

import pysam
import pytest

from vcfmulti2one import Multi2OneApp, Multi2OneConfig
from vcfmulti2one.core import (
    PROVENANCE_TAG,
    Arity,
    ArityMismatchPolicy,
    DecompositionEngine,
    EngineConfig,
    UnsupportedAlleleKind,
)
from vcfmulti2one.io import VCFReader, VCFWriter, WriteConfig

from .helpers import write_vcf, save_artifact, make_record, gt

LOGGER = logging.getLogger("tests")
SAMPLES = ["S1", "S2"]


def _make_vcf(tmp_path: Path) -> Path:
    variants = [
        {
            "pos": 100,
            "id": "rs100",
            "ref": "A",
            "alt": "C,G,T",
            "qual": "50",
            "info": "AC=5,6,7;AN=4;RC=10,1,2,3;DB;CSQ=x,y",
            "format": "GT:DP:AD",
            "genotypes": ["0/1:10:5,5,0,0", "1/3:12:0,6,0,6"],
        },
        {
            "pos": 200,
            "id": "rs200",
            "ref": "G",
            "alt": "A",
            "info": "AC=1;AN=4;RC=3,1",
            "format": "GT:DP:AD",
            "genotypes": ["0/1:8:4,4", "0/0:9:9,0"],
        },
    ]
    ivcf = tmp_path / "multi.vcf"
    write_vcf(ivcf, SAMPLES, variants)
    return ivcf


def _run_app(ivcf: Path, out: Path, **kwargs) -> Multi2OneApp:
    config = Multi2OneConfig(input_vcf=ivcf, output=out, verbose=False, **kwargs)
    app = Multi2OneApp(config)
    app.run()
    save_artifact(out, "io")
    return app


class TestVCFReader:
    def test_arity_table_from_header(self, tmp_path: Path):
        with VCFReader(_make_vcf(tmp_path), LOGGER) as reader:
            table = reader.arity_table()
        assert table.arity_of("AC") is Arity.PER_ALT_ALLELE
        assert table.arity_of("RC") is Arity.PER_ALLELE
        assert table.arity_of("AN") is None
        assert table.arity_of("DB") is None
        assert table.arity_of("CSQ") is None

    def test_records_are_materialized(self, tmp_path: Path):
        with VCFReader(_make_vcf(tmp_path), LOGGER) as reader:
            assert reader.samples == SAMPLES
            first, second = list(reader)
        assert first.locus == "1:100"
        assert first.id == "rs100"
        assert first.alternates == ("C", "G", "T")
        assert first.info["AC"] == (5, 6, 7)
        assert first.info["RC"] == (10, 1, 2, 3)
        assert first.info["DB"] is True
        assert first.end is None
        assert first.samples["S2"].alleles == ("C", "T")
        assert first.samples["S2"].fields["DP"] == 12
        assert not first.samples["S2"].phased
        assert second.alternates == ("A",)

    def test_missing_file_exits(self, tmp_path: Path):
        with pytest.raises(SystemExit):
            VCFReader(tmp_path / "missing.vcf", LOGGER)


class TestVCFWriter:
    def test_header_declares_provenance_and_drops_samples(self, tmp_path: Path):
        with VCFReader(_make_vcf(tmp_path), LOGGER) as reader:
            header = VCFWriter.build_header(reader.header, include_samples=False)
        assert PROVENANCE_TAG in header.info
        assert "AC" in header.info
        assert len(header.samples) == 0

    def test_unknown_output_format(self, tmp_path: Path):
        with VCFReader(_make_vcf(tmp_path), LOGGER) as reader:
            with pytest.raises(ValueError):
                VCFWriter(
                    tmp_path / "out.vcf",
                    reader.header,
                    WriteConfig(include_samples=False, output_format="x"),
                )

    def test_engine_output_round_trip(self, tmp_path: Path):
        out = tmp_path / "split.vcf"
        with VCFReader(_make_vcf(tmp_path), LOGGER) as reader:
            engine = DecompositionEngine(
                reader.arity_table(),
                EngineConfig(True, ArityMismatchPolicy.FAIL),
                LOGGER,
            )
            with VCFWriter(
                out, reader.header, WriteConfig(include_samples=True), LOGGER
            ) as writer:
                written = writer.write_all(engine.run(reader))
        assert written == 4

        with pysam.VariantFile(str(out)) as vf:
            assert list(vf.header.samples) == SAMPLES
            recs = list(vf)
        assert [(r.pos, r.alts) for r in recs] == [
            (100, ("C",)),
            (100, ("G",)),
            (100, ("T",)),
            (200, ("A",)),
        ]
        assert [r.id for r in recs] == ["rs100"] * 3 + ["rs200"]


class TestApp:
    def test_split_with_samples(self, tmp_path: Path):
        out = tmp_path / "split.vcf"
        app = _run_app(_make_vcf(tmp_path), out, include_samples=True)

        with pysam.VariantFile(str(out)) as vf:
            on_c, on_g, on_t, single = list(vf)

        assert on_c.info["AC"] == (5,)
        assert on_g.info["AC"] == (6,)
        assert on_t.info["AC"] == (7,)
        assert on_c.info["RC"] == (10, 1)
        assert on_t.info["RC"] == (10, 3)
        assert on_c.info["AN"] == 4
        assert on_c.info["DB"] is True
        assert on_c.info["CSQ"] == ("x", "y")
        for rec in (on_c, on_g, on_t):
            assert rec.info[PROVENANCE_TAG] == "C|G|T"
            assert rec.ref == "A"

        # S2 is 1/3 (C/T) on the source record
        assert on_c.samples["S2"]["GT"] == (1, 0)
        assert on_g.samples["S2"]["GT"] == (0, 0)
        assert on_t.samples["S2"]["GT"] == (0, 1)
        # S1 is 0/1 (A/C)
        assert on_c.samples["S1"]["GT"] == (0, 1)
        assert on_c.samples["S1"]["DP"] == 10
        assert on_g.samples["S1"]["GT"] == (0, 0)

        assert single.alts == ("A",)
        assert single.info["AC"] == (1,)
        assert PROVENANCE_TAG not in single.info
        assert single.samples["S1"]["GT"] == (0, 1)
        assert single.samples["S1"]["AD"] == (4, 4)

        stats = app.engine.stats
        assert stats.records_read == 2
        assert stats.records_split == 1
        assert stats.records_written == 4

    def test_sites_only_output(self, tmp_path: Path):
        out = tmp_path / "sites.vcf"
        _run_app(_make_vcf(tmp_path), out)
        with pysam.VariantFile(str(out)) as vf:
            assert len(vf.header.samples) == 0
            recs = list(vf)
        assert len(recs) == 4

    def test_symbolic_genotype_fails(self, tmp_path: Path):
        ivcf = tmp_path / "symbolic.vcf"
        write_vcf(
            ivcf,
            ["S1"],
            [{"pos": 100, "ref": "A", "alt": "C,<DEL>", "genotypes": ["0/2"]}],
            extra_header=['##ALT=<ID=DEL,Description="Deletion">'],
        )
        config = Multi2OneConfig(
            input_vcf=ivcf,
            output=tmp_path / "out.vcf",
            include_samples=True,
            verbose=False,
        )
        with pytest.raises(UnsupportedAlleleKind):
            Multi2OneApp(config).run()

    def test_symbolic_genotype_skipped(self, tmp_path: Path):
        ivcf = tmp_path / "symbolic.vcf"
        write_vcf(
            ivcf,
            ["S1"],
            [
                {"pos": 100, "ref": "A", "alt": "C,<DEL>", "genotypes": ["0/2"]},
                {"pos": 200, "ref": "A", "alt": "C,G", "genotypes": ["1/2"]},
            ],
            extra_header=['##ALT=<ID=DEL,Description="Deletion">'],
        )
        out = tmp_path / "out.vcf"
        app = _run_app(ivcf, out, include_samples=True, skip_errors=True)
        with pysam.VariantFile(str(out)) as vf:
            assert [r.pos for r in vf] == [200, 200]
        assert app.engine.stats.records_failed == 1

    def test_arity_mismatch_dropped(self, tmp_path: Path):
        ivcf = tmp_path / "bad_arity.vcf"
        write_vcf(
            ivcf,
            [],
            [{"pos": 100, "ref": "A", "alt": "C,G", "info": "AC=1,2,3;AN=4"}],
        )
        out = tmp_path / "out.vcf"
        app = _run_app(
            ivcf, out, arity_mismatch_policy=ArityMismatchPolicy.DROP_FIELD
        )
        with pysam.VariantFile(str(out)) as vf:
            recs = list(vf)
        assert len(recs) == 2
        assert all("AC" not in r.info and r.info["AN"] == 4 for r in recs)
        assert app.engine.stats.fields_dropped == 1

    def test_undeclared_info_and_format_keys(self, tmp_path: Path):
        ivcf = tmp_path / "undeclared.vcf"
        write_vcf(
            ivcf,
            ["S1"],
            [
                {
                    "pos": 100,
                    "ref": "A",
                    "alt": "C,G",
                    "info": "AC=1,2;XX=foo",
                    "format": "GT:YY",
                    "genotypes": ["0/1:5"],
                },
                {
                    "pos": 200,
                    "ref": "G",
                    "alt": "T",
                    "info": "AC=1;XX=bar",
                    "format": "GT:YY",
                    "genotypes": ["0/1:7"],
                },
            ],
        )
        out = tmp_path / "out.vcf"
        app = _run_app(ivcf, out, include_samples=True)
        with pysam.VariantFile(str(out)) as vf:
            assert "XX" in vf.header.info
            assert "YY" in vf.header.formats
            on_c, on_g, single = list(vf)
        assert on_c.info["XX"] == "foo"
        assert on_g.info["XX"] == "foo"
        assert on_c.info["AC"] == (1,)
        assert on_c.samples["S1"]["YY"] == "5"
        assert single.info["XX"] == "bar"
        assert single.samples["S1"]["YY"] == "7"
        assert app.engine.stats.records_written == 3

    def test_undeclared_sites_only(self, tmp_path: Path):
        ivcf = tmp_path / "undeclared.vcf"
        write_vcf(
            ivcf,
            ["S1"],
            [
                {
                    "pos": 100,
                    "ref": "A",
                    "alt": "C",
                    "info": "XX=foo",
                    "format": "GT:YY",
                    "genotypes": ["0/1:5"],
                }
            ],
        )
        out = tmp_path / "out.vcf"
        _run_app(ivcf, out)
        with pysam.VariantFile(str(out)) as vf:
            assert "YY" not in vf.header.formats
            (rec,) = list(vf)
        assert rec.info["XX"] == "foo"

    def test_key_first_seen_after_header_is_left_out(self, tmp_path: Path, caplog):
        ivcf = tmp_path / "late.vcf"
        write_vcf(
            ivcf,
            [],
            [
                {"pos": 100, "ref": "A", "alt": "C,G", "info": "AC=1,2"},
                {"pos": 200, "ref": "G", "alt": "T", "info": "AC=1;LATE=foo"},
            ],
        )
        out = tmp_path / "out.vcf"
        with VCFReader(ivcf, LOGGER) as reader:
            engine = DecompositionEngine(
                reader.arity_table(),
                EngineConfig(False, ArityMismatchPolicy.FAIL),
                LOGGER,
            )
            with caplog.at_level(logging.WARNING, logger="tests"):
                with VCFWriter(
                    out, reader.header, WriteConfig(include_samples=False), LOGGER
                ) as writer:
                    assert writer.write_all(engine.run(reader)) == 3
        assert "INFO/LATE" in caplog.text
        with pysam.VariantFile(str(out)) as vf:
            recs = list(vf)
        assert len(recs) == 3
        assert "LATE" not in recs[2].info
        assert recs[2].info["AC"] == (1,)

    def test_in_memory_record_with_undeclared_keys(self, tmp_path: Path):
        out = tmp_path / "out.vcf"
        with VCFReader(_make_vcf(tmp_path), LOGGER) as reader:
            header = reader.header
            with VCFWriter(
                out, header, WriteConfig(include_samples=True), LOGGER
            ) as writer:
                writer.write(
                    make_record(
                        alternates=("C",),
                        info={"NEWINT": 3, "NEWFLAG": True},
                        samples={"S1": gt("A", "C", NEWF=1.5), "S2": gt("A", "A")},
                    )
                )
        with pysam.VariantFile(str(out)) as vf:
            assert vf.header.info["NEWINT"].type == "Integer"
            assert vf.header.info["NEWFLAG"].type == "Flag"
            assert vf.header.formats["NEWF"].type == "Float"
            (rec,) = list(vf)
        assert rec.info["NEWINT"] == 3
        assert rec.info["NEWFLAG"] is True
        assert rec.samples["S1"]["NEWF"] == pytest.approx(1.5)

    def test_summary_and_run_info(self, tmp_path: Path):
        out = tmp_path / "split.vcf"
        _run_app(
            _make_vcf(tmp_path),
            out,
            summary_path=tmp_path / "summary.tsv",
            run_info_dir=tmp_path / "info",
        )
        summary = (tmp_path / "summary.tsv").read_text()
        assert "records_split\t1" in summary
        assert "alt_alleles=3\t1" in summary
        run_info = (tmp_path / "info" / "run_info.txt").read_text()
        assert "Variants written: 4" in run_info
        assert "Arity mismatch policy: fail" in run_info

    def test_compressed_output_with_index(self, tmp_path: Path):
        out = tmp_path / "split.vcf.gz"
        _run_app(_make_vcf(tmp_path), out, output_format="z", write_index=True)
        assert Path(str(out) + ".tbi").exists()
        with pysam.VariantFile(str(out)) as vf:
            assert len(list(vf.fetch("1", 99, 100))) == 3
