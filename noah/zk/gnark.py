"""
gnark Proof Backend
===================

Wrapper around the gnark Groth16 command-line tools.

The prover command is called with a witness JSON path and the path to write
the proof to; the verifier command exits with status 0 iff the proof
verifies. Each call works in its own temporary directory under the build
directory, so concurrent calls never share files. Public signals are assembled locally from the circuit evaluation so
they follow the same 28-slot layout as every other backend.

Version: 0.1.0
"""

import json
import shlex
import subprocess
import tempfile
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from noah.circuit.circuit import KYCCircuit
from noah.circuit.models import IdentityWitness, PublicParams
from noah.circuit.signals import PublicSignals
from noah.config import settings
from noah.logging import get_logger
from noah.zk.backend import ProofBackend, ProofGenerationError
from noah.zk.models import Groth16Proof, ProofBundle, ProofMetadata


logger = get_logger(__name__)

WITNESS_FILE = "input_temp.json"
PROOF_FILE = "proof.json"
VERIFY_PROOF_FILE = "verify_proof_temp.json"
VERIFYING_KEY_FILE = "verification_key.vk"


def build_assignment(witness: IdentityWitness, params: PublicParams) -> dict[str, Any]:
    """Witness JSON using the circuit's field names."""
    return {
        "actualAge": witness.actual_age,
        "actualJurisdiction": witness.actual_jurisdiction,
        "actualAccredited": witness.actual_accredited,
        "credentialHash": witness.credential_hash,
        "passportNumber": witness.passport_number,
        "expiryDate": witness.expiry_date,
        "minAge": params.min_age,
        "allowedJurisdictions": list(params.allowed_jurisdictions),
        "requireAccredited": params.require_accredited,
        "credentialHashPublic": params.credential_hash_public,
        "recipientAddress": params.recipient_address,
        "currentDate": params.current_date,
        "sanctionedCountries": list(params.sanctioned_countries),
    }


def parse_proof(data: dict[str, Any]) -> Groth16Proof:
    """
    Parse a proof from either the gnark BN254 JSON encoding
    (``Ar``/``Bs``/``Krs``) or the flat ``a``/``b``/``c`` encoding.
    """
    if "Ar" in data:
        ar, bs, krs = data["Ar"], data["Bs"], data["Krs"]
        return Groth16Proof(
            a=[str(ar["X"]), str(ar["Y"])],
            b=[
                [str(bs["X"]["A0"]), str(bs["X"]["A1"])],
                [str(bs["Y"]["A0"]), str(bs["Y"]["A1"])],
            ],
            c=[str(krs["X"]), str(krs["Y"])],
        )
    return Groth16Proof(
        a=[str(v) for v in data["a"]],
        b=[[str(v) for v in row] for row in data["b"]],
        c=[str(v) for v in data["c"]],
    )


class GnarkProofBackend(ProofBackend):
    """
    Groth16 backend driving the gnark prover and verifier binaries.

    Usage:
        backend = GnarkProofBackend("build/")
        bundle = backend.prove(witness, params)
    """

    def __init__(
        self,
        build_dir: str | Path,
        prover_command: str | None = None,
        verifier_command: str | None = None,
    ) -> None:
        self.build_dir = Path(build_dir)
        self.prover_command = shlex.split(prover_command or settings.circuit.prover_command)
        self.verifier_command = shlex.split(verifier_command or settings.circuit.verifier_command)
        self._circuit = KYCCircuit()
        self._validate_setup()

    def _validate_setup(self) -> None:
        """Warn when the build artefacts are missing."""
        if not self.build_dir.exists():
            logger.warning("zk_circuit_build_dir_not_found", path=str(self.build_dir))

    @property
    def name(self) -> str:
        return "gnark"

    @property
    def verifying_key(self) -> bytes:
        vk_path = self.build_dir / VERIFYING_KEY_FILE
        if not vk_path.exists():
            raise FileNotFoundError(f"Verification key not found: {vk_path}")
        return vk_path.read_bytes()

    def _run(self, command: list[str], *args: str) -> subprocess.CompletedProcess:
        return subprocess.run(
            [*command, *args],
            capture_output=True,
            text=True,
            cwd=self.build_dir.parent,
        )

    def prove(self, witness: IdentityWitness, params: PublicParams) -> ProofBundle:
        """Run the gnark prover on the witness."""
        with tempfile.TemporaryDirectory(dir=self.build_dir, prefix="prove-") as work_dir:
            input_file = Path(work_dir) / WITNESS_FILE
            proof_file = Path(work_dir) / PROOF_FILE

            with open(input_file, "w") as f:
                json.dump(build_assignment(witness, params), f)

            start_time = time.time()
            result = self._run(self.prover_command, str(input_file), str(proof_file))
            proving_time_ms = int((time.time() - start_time) * 1000)

            if result.returncode != 0:
                logger.error(
                    "gnark_proof_generation_failed",
                    stderr=result.stderr,
                    circuit=self._circuit.name,
                )
                raise ProofGenerationError(f"Proof generation failed: {result.stderr}")

            with open(proof_file) as f:
                proof_json = json.load(f)

            outputs = self._circuit.evaluate(witness, params)

            logger.info(
                "zk_proof_generated",
                circuit=self._circuit.name,
                backend=self.name,
                proving_time_ms=proving_time_ms,
            )

            return ProofBundle(
                proof=parse_proof(proof_json.get("proof", proof_json)),
                public_signals=PublicSignals.from_circuit(params, outputs),
                metadata=ProofMetadata(
                    circuit_name=self._circuit.name,
                    backend=self.name,
                    proving_time_ms=proving_time_ms,
                ),
            )

    def verify(
        self,
        verifying_key: bytes,
        proof: Groth16Proof,
        public_signals: Sequence[int],
    ) -> bool:
        """Run the gnark verifier against the on-disk verifying key."""
        if verifying_key != self.verifying_key:
            logger.warning("gnark_verifying_key_mismatch")
            return False

        with tempfile.TemporaryDirectory(dir=self.build_dir, prefix="verify-") as work_dir:
            proof_file = Path(work_dir) / VERIFY_PROOF_FILE
            with open(proof_file, "w") as f:
                json.dump(
                    {
                        "proof": proof.model_dump(include={"a", "b", "c"}),
                        "publicInputs": [str(s) for s in public_signals],
                    },
                    f,
                )

            start_time = time.time()
            result = self._run(self.verifier_command, str(proof_file))
            verification_time_ms = int((time.time() - start_time) * 1000)

        valid = result.returncode == 0
        logger.info(
            "zk_proof_verified",
            backend=self.name,
            valid=valid,
            verification_time_ms=verification_time_ms,
        )
        return valid
