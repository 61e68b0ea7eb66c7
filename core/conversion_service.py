"""変換サービスクラス - 読み込み・生成・出力のオーケストレーション"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from common.json_utils import save_json
from config.settings import GeneratorConfig
from core.batch_file_service import KIND_TABLE, BatchFileService, BatchInput
from geometryEngine.generator_factory import generate_solids
from geometryEngine.records import ElementRecord
from geometryEngine.solid import GenerationResult
from ifcCreator.api import IfcCreator

logger = logging.getLogger(__name__)


def normalize_categories(categories: Optional[Iterable[str]]) -> Optional[set]:
    """カテゴリ指定（column, beam, ...）を要素種別名の集合に変換

    Raises:
        ValueError: 不明なカテゴリが含まれる場合
    """
    if not categories:
        return None
    selected = set()
    for category in categories:
        key = category.strip().lower()
        if not key:
            continue
        if key not in KIND_TABLE:
            raise ValueError(f"不明なカテゴリです: {category} (有効: {', '.join(KIND_TABLE)})")
        selected.add(KIND_TABLE[key][1])
    return selected or None


def filter_records(records: Iterable[ElementRecord], selected: Optional[set]) -> List[ElementRecord]:
    if selected is None:
        return list(records)
    return [record for record in records if record.element_type in selected]


class ConversionService:
    """バッチファイル → ソリッド生成 → IFC出力 のプロセス全体をオーケストレーションするサービス"""

    def __init__(self, config: Optional[GeneratorConfig] = None, logger=None):
        self.config = config or GeneratorConfig()
        self.logger = logger or logging.getLogger(__name__)
        self.file_service = BatchFileService(self.logger.getChild("BatchFileService"))

    def load(self, file_path: Union[str, Path]) -> BatchInput:
        return self.file_service.load_batch_file(file_path)

    def generate(
        self,
        batch: BatchInput,
        categories: Optional[Iterable[str]] = None,
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> GenerationResult:
        """ソリッド生成（カテゴリ指定時は該当要素のみ）"""
        selected = normalize_categories(categories)
        records = filter_records(batch.records, selected)
        if selected is not None:
            self.logger.info("変換対象カテゴリ: %s (%d 要素)", ", ".join(sorted(selected)), len(records))
        context = batch.to_context(self.config, self.logger.getChild("geometryEngine"))
        return generate_solids(records, context, should_cancel)

    def convert_file(
        self,
        input_file: Union[str, Path],
        output_file: Optional[Union[str, Path]] = None,
        summary_file: Optional[Union[str, Path]] = None,
        categories: Optional[Iterable[str]] = None,
    ) -> Dict[str, Any]:
        """バッチファイルを読み込み IFC を出力

        Returns:
            生成サマリー（solid_count / skipped など）

        Raises:
            InputDataError: 入力ファイルが不正な場合
            ValueError: 不明なカテゴリが指定された場合
            IFCGenerationError: IFCファイルを書き込めない場合
        """
        input_path = Path(input_file)
        output_path = Path(output_file) if output_file else self._default_output(input_path)

        batch = self.load(input_path)
        result = self.generate(batch, categories)

        creator = IfcCreator(self.config.project_name)
        creator.export(result.solids, output_path)

        summary = result.to_summary()
        summary["input_file"] = str(input_path)
        summary["output_file"] = str(output_path)
        summary["rejected"] = batch.rejected
        summary["ifc_failed"] = creator.failed
        summary["ifc_entities"] = creator.created

        if summary_file:
            save_json(summary, summary_file)
            self.logger.info("サマリーを出力しました: %s", summary_file)
        return summary

    def _default_output(self, input_path: Path) -> Path:
        return Path(self.config.default_output_dir) / f"{input_path.stem}.ifc"
