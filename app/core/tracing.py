"""
OpenTelemetry Tracing Module

OTLP gRPC exporter로 스팬을 전송합니다.
Gemini 호출은 app.services.image_generator.client에서 스팬으로 기록됩니다.
"""
import logging
from typing import Optional

from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.sampling import TraceIdRatioBased

from .config import TracingConfig

logger = logging.getLogger(__name__)

# 전역 상태
_tracer_provider: Optional[TracerProvider] = None
_tracing_enabled: bool = False


def init_tracing(config: TracingConfig, service_version: str = "1.0.0") -> bool:
    """
    OpenTelemetry 트레이싱을 초기화합니다.

    Args:
        config: TracingConfig 설정
        service_version: 리소스에 기록할 서비스 버전

    Returns:
        초기화 성공 여부
    """
    global _tracer_provider, _tracing_enabled

    if not config.enabled:
        logger.info("트레이싱이 비활성화되어 있습니다 (TRACING_ENABLED=false)")
        _tracing_enabled = False
        return True

    try:
        from opentelemetry.sdk.resources import Resource, SERVICE_NAME
        from opentelemetry.sdk.trace.export import BatchSpanProcessor
        from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter

        resource = Resource.create({
            SERVICE_NAME: config.service_name,
            "service.version": service_version,
        })

        tracer_provider = TracerProvider(
            resource=resource,
            sampler=TraceIdRatioBased(config.sample_rate)
        )

        otlp_exporter = OTLPSpanExporter(
            endpoint=config.otlp_endpoint.replace("http://", "").replace("https://", ""),
            insecure=config.insecure
        )
        tracer_provider.add_span_processor(BatchSpanProcessor(otlp_exporter))

        trace.set_tracer_provider(tracer_provider)
        _tracer_provider = tracer_provider

        _tracing_enabled = True
        logger.info(f"✅ 트레이싱 초기화 완료")
        logger.info(f"   - Endpoint: {config.otlp_endpoint}")
        logger.info(f"   - Service: {config.service_name}")
        logger.info(f"   - Sample Rate: {config.sample_rate}")

        return True

    except ImportError as e:
        logger.warning(f"⚠️ OTLP exporter 누락, 트레이싱 비활성화: {e}")
        _tracing_enabled = False
        return False
    except Exception as e:
        logger.error(f"❌ 트레이싱 초기화 실패: {e}")
        _tracing_enabled = False
        return False


def get_tracer(name: str = "gemini-image-relay") -> trace.Tracer:
    """명명된 Tracer 인스턴스를 반환합니다."""
    return trace.get_tracer(name)


def shutdown_tracing() -> None:
    """트레이싱을 정상 종료하고 남은 스팬을 플러시합니다."""
    global _tracer_provider, _tracing_enabled

    if _tracer_provider is not None:
        try:
            _tracer_provider.shutdown()
            logger.info("✅ 트레이싱 종료 완료")
        except Exception as e:
            logger.error(f"❌ 트레이싱 종료 실패: {e}")
        _tracer_provider = None

    _tracing_enabled = False


def is_tracing_enabled() -> bool:
    """트레이싱 활성화 여부를 반환합니다."""
    return _tracing_enabled
