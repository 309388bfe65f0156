"""
Clair v1 API client.

Submits image layers for analysis and fetches the vulnerabilities Clair
found in them. Layers must be submitted parent first, and the top layer
then carries the vulnerabilities of the whole image.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Union

import requests

from constants import (
    DEFAULT_ANALYZER_TIMEOUT,
    GET_LAYER_FEATURES_URI,
    LAYER_FORMAT,
    POST_LAYER_URI,
)
from core.exceptions import AnalyzerException, ScanInterrupted
from core.models import ImageLayer, LayerVulnerabilities, VulnerabilityFinding

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Feature:
    """A package Clair detected in a layer, with its vulnerabilities."""

    name: str
    namespace: str
    version: str
    vulnerabilities: tuple[VulnerabilityFinding, ...] = ()


@dataclass(frozen=True)
class Layer:
    """Layer as returned by Clair."""

    name: str
    namespace: str = ""
    parent_name: str = ""
    features: tuple[Feature, ...] = ()


@dataclass(frozen=True)
class LayerOk:
    """Successful layer response."""

    layer: Layer


@dataclass(frozen=True)
class LayerError:
    """Error envelope returned by Clair."""

    message: str


LayerResponse = Union[LayerOk, LayerError]


def parse_layer(data: dict) -> Layer:
    """Build a Layer from the "Layer" object of a Clair response."""
    features = []
    for raw_feature in data.get("Features") or []:
        vulnerabilities = tuple(
            VulnerabilityFinding(
                name=raw_vuln.get("Name", ""),
                namespace=raw_vuln.get("NamespaceName", ""),
                severity=raw_vuln.get("Severity", ""),
            )
            for raw_vuln in raw_feature.get("Vulnerabilities") or []
        )
        features.append(
            Feature(
                name=raw_feature.get("Name", ""),
                namespace=raw_feature.get("NamespaceName", ""),
                version=raw_feature.get("Version", ""),
                vulnerabilities=vulnerabilities,
            )
        )

    return Layer(
        name=data.get("Name", ""),
        namespace=data.get("NamespaceName", ""),
        parent_name=data.get("ParentName", ""),
        features=tuple(features),
    )


def parse_layer_envelope(payload: dict) -> LayerResponse:
    """
    Decode a Clair layer envelope into a tagged result.

    Args:
        payload: Decoded JSON body

    Returns:
        LayerError if the envelope carries an error, LayerOk otherwise

    Raises:
        AnalyzerException: If the envelope has neither a layer nor an error
    """
    if not isinstance(payload, dict):
        raise AnalyzerException("Malformed response from Clair: expected a JSON object")

    error = payload.get("Error")
    if error:
        message = error.get("Message") if isinstance(error, dict) else str(error)
        return LayerError(message=message or "unknown error")

    layer = payload.get("Layer")
    if not isinstance(layer, dict):
        raise AnalyzerException("Malformed response from Clair: missing layer")

    return LayerOk(layer=parse_layer(layer))


def flatten_vulnerabilities(layer: Layer) -> tuple[VulnerabilityFinding, ...]:
    """List the vulnerabilities of every feature, in the order Clair returned them."""
    return tuple(
        vulnerability
        for feature in layer.features
        for vulnerability in feature.vulnerabilities
    )


class ClairClient:
    """
    Client for the Clair v1 layer API.

    Requests block until Clair answers unless a timeout is given. Every
    failure is raised as AnalyzerException; nothing is retried.
    """

    def __init__(
        self,
        base_url: str,
        timeout: Optional[float] = DEFAULT_ANALYZER_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize Clair client.

        Args:
            base_url: Clair base URL (e.g., "http://127.0.0.1:6060")
            timeout: Request timeout in seconds (None waits indefinitely)
            session: HTTP session to use (a new one by default)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def submit_layer(
        self,
        layer_id: str,
        parent_id: Optional[str],
        layer_url: str,
    ) -> None:
        """
        Ask Clair to analyze one layer.

        Args:
            layer_id: Layer identifier
            parent_id: Identifier of the parent layer (None for the base layer)
            layer_url: URL Clair fetches the layer archive from

        Raises:
            AnalyzerException: If the request fails or Clair rejects the layer
        """
        payload = {
            "Layer": {
                "Name": layer_id,
                "Path": layer_url,
                "ParentName": parent_id or "",
                "Format": LAYER_FORMAT,
            }
        }

        logger.debug(f"Submitting layer {layer_id} (parent: {parent_id or 'none'})")
        try:
            response = self.session.post(
                f"{self.base_url}{POST_LAYER_URI}",
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            raise AnalyzerException(f"Could not submit layer {layer_id}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise AnalyzerException(
                f"Got response {response.status_code} with message {self._error_message(response)}",
                status_code=response.status_code,
            )

    def analyze_layers(
        self,
        layers: Sequence[ImageLayer],
        url_for: Callable[[ImageLayer], str],
        cancel_event: Optional[threading.Event] = None,
    ) -> None:
        """
        Submit every layer in image order, each naming the previous one as parent.

        Args:
            layers: Layers of the image, base layer first
            url_for: Builds the fetch URL of a layer
            cancel_event: Stops the submissions when set

        Raises:
            AnalyzerException: On the first failed submission
            ScanInterrupted: If cancel_event is set before a submission
        """
        logger.info(f"Analyzing {len(layers)} layers")
        parent_id = None
        for layer in layers:
            if cancel_event is not None and cancel_event.is_set():
                raise ScanInterrupted()
            self.submit_layer(layer.layer_id, parent_id, url_for(layer))
            parent_id = layer.layer_id

    def fetch_layer(self, layer_id: str) -> LayerResponse:
        """
        Fetch a layer with its features and vulnerabilities.

        Args:
            layer_id: Layer identifier

        Returns:
            LayerOk or LayerError as decoded from the envelope

        Raises:
            AnalyzerException: If Clair is unreachable, answers with a
                non-2xx status or returns an undecodable body
        """
        url = f"{self.base_url}{GET_LAYER_FEATURES_URI.format(layer_id)}"
        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise AnalyzerException(f"Could not fetch layer {layer_id}: {e}") from e

        if not 200 <= response.status_code < 300:
            raise AnalyzerException(
                f"Got response {response.status_code} with message {self._error_message(response)}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as e:
            raise AnalyzerException(f"Malformed response from Clair: {e}") from e

        return parse_layer_envelope(payload)

    def fetch_vulnerabilities(self, layer_id: str) -> LayerVulnerabilities:
        """
        Fetch the vulnerabilities of a layer and all of its ancestors.

        A layer without any detected feature is reported as unsupported
        rather than failing the scan.

        Args:
            layer_id: Identifier of the top layer of the image

        Returns:
            LayerVulnerabilities with the flattened findings

        Raises:
            AnalyzerException: If the layer cannot be fetched or Clair reports an error
        """
        result = self.fetch_layer(layer_id)
        if isinstance(result, LayerError):
            raise AnalyzerException(result.message)

        layer = result.layer
        if not layer.features:
            logger.warning(
                "No features have been detected in the image. "
                "This usually means that the image isn't supported by Clair."
            )
            return LayerVulnerabilities(layer_id=layer_id, unsupported=True, namespace=layer.namespace or None)

        findings = flatten_vulnerabilities(layer)
        logger.debug(f"Layer {layer_id}: {len(layer.features)} features, {len(findings)} vulnerabilities")
        return LayerVulnerabilities(
            layer_id=layer_id,
            findings=findings,
            namespace=layer.namespace or None,
        )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        """Prefer the message of a Clair error envelope over the raw body."""
        try:
            payload = response.json()
        except ValueError:
            return response.text
        if isinstance(payload, dict) and isinstance(payload.get("Error"), dict):
            return payload["Error"].get("Message") or response.text
        return response.text
