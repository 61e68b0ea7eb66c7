"""Geometry Generator Factory

レコード型 → ジェネレーター の閉じたディスパッチテーブルと、
要素単位で失敗を隔離するバッチ生成ループを提供します。
"""

import logging
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Type

from exceptions.custom_errors import ElementSkippedError, GeometryEngineError, SkipReason
from geometryEngine.context import GenerationContext
from geometryEngine.generators import (
    BeamGenerator,
    BraceGenerator,
    ColumnGenerator,
    ElementGenerator,
    FootingGenerator,
    FoundationColumnGenerator,
    PileGenerator,
    SlabGenerator,
    StripFootingGenerator,
    WallGenerator,
)
from geometryEngine.records import (
    ELEMENT_RECORD_TYPES,
    BeamRecord,
    BraceRecord,
    ColumnRecord,
    ElementRecord,
    FootingRecord,
    FoundationColumnRecord,
    PileRecord,
    SlabRecord,
    StripFootingRecord,
    WallRecord,
)
from geometryEngine.solid import GenerationResult, SkippedElement, Solid
from utils.logger import get_element_logger

logger = logging.getLogger(__name__)

GENERATOR_TABLE: Mapping[type, Type[ElementGenerator]] = {
    ColumnRecord: ColumnGenerator,
    BeamRecord: BeamGenerator,
    BraceRecord: BraceGenerator,
    PileRecord: PileGenerator,
    FootingRecord: FootingGenerator,
    StripFootingRecord: StripFootingGenerator,
    FoundationColumnRecord: FoundationColumnGenerator,
    SlabRecord: SlabGenerator,
    WallRecord: WallGenerator,
}


class GeometryGeneratorFactory:
    """要素ジオメトリ生成の入口

    全レコード型にジェネレーターが割り当てられていない場合は
    初期化時にエラーとします。
    """

    def __init__(
        self,
        context: GenerationContext,
        table: Mapping[type, Type[ElementGenerator]] = GENERATOR_TABLE,
    ):
        missing = [cls.__name__ for cls in ELEMENT_RECORD_TYPES if cls not in table]
        if missing:
            raise GeometryEngineError(f"ジェネレーターが未登録のレコード型があります: {missing}")
        self.context = context
        self.logger = context.logger.getChild("factory")
        self._generators: Dict[type, ElementGenerator] = {
            record_type: generator_cls() for record_type, generator_cls in table.items()
        }

    def generator_for(self, record: ElementRecord) -> ElementGenerator:
        try:
            return self._generators[type(record)]
        except KeyError:
            raise GeometryEngineError(f"未対応のレコード型です: {type(record).__name__}") from None

    def generate_element(self, record: ElementRecord) -> List[Solid]:
        """1要素を生成（スキップ時は ElementSkippedError）"""
        return self.generator_for(record).generate(record, self.context)

    def generate(
        self,
        records: Iterable[ElementRecord],
        should_cancel: Optional[Callable[[], bool]] = None,
    ) -> GenerationResult:
        """バッチ生成

        1要素の失敗はその要素のスキップとして記録し、残りの処理を続行します。
        should_cancel が True を返した時点で残りの要素を打ち切ります。
        """
        result = GenerationResult()
        count = 0
        for record in records:
            if should_cancel is not None and should_cancel():
                self.logger.info("生成を中断しました（処理済み %d 要素）", count)
                result.cancelled = True
                break
            count += 1
            try:
                solids = self.generate_element(record)
            except ElementSkippedError as e:
                get_element_logger(self.logger, record.element_type).warning(str(e))
                result.skipped.append(
                    SkippedElement(record.id, record.element_type, e.reason, str(e))
                )
                continue
            except Exception as e:
                get_element_logger(self.logger, record.element_type).error(
                    "%s '%s' の生成中にエラーが発生したためスキップします: %s",
                    record.element_type, record.id, e,
                    exc_info=True,
                )
                result.skipped.append(
                    SkippedElement(record.id, record.element_type, SkipReason.GENERATION_ERROR, str(e))
                )
                continue
            result.solids.extend(solids)

        self.logger.info(
            "ジオメトリ生成完了: %d 要素 → %d ソリッド, スキップ %d (%s)",
            count, len(result.solids), len(result.skipped), result.skipped_by_reason(),
        )
        return result


def generate_solids(
    records: Iterable[ElementRecord],
    context: GenerationContext,
    should_cancel: Optional[Callable[[], bool]] = None,
) -> GenerationResult:
    return GeometryGeneratorFactory(context).generate(records, should_cancel)
