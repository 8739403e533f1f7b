from unittest import mock

import pytest

pytest.importorskip("transformers")

from podsync import translator  # noqa: E402
from podsync.exceptions import TranslationError  # noqa: E402


@pytest.fixture
def hf_models():
    with mock.patch.object(translator.torch.cuda, "is_available", return_value=False), \
            mock.patch.object(translator, "AutoTokenizer") as tokenizer_cls, \
            mock.patch.object(translator, "AutoModelForSeq2SeqLM") as model_cls:
        tokenizer = tokenizer_cls.from_pretrained.return_value
        tokenizer.return_value = {"input_ids": mock.Mock()}
        yield tokenizer, model_cls.from_pretrained.return_value


def test_batch_skips_empty_texts(hf_models):
    tokenizer, _ = hf_models
    tokenizer.batch_decode.return_value = [" Hello ", "World"]

    hf = translator.HuggingFaceTranslator(device="cuda")
    result = hf.translate_batch(["مرحبا", "", "عالم"])

    assert hf.device == "cpu"
    assert result == ["Hello", "", "World"]
    assert tokenizer.call_args.args[0] == ["مرحبا", "عالم"]


def test_all_empty_batch_does_not_call_model(hf_models):
    tokenizer, model = hf_models
    assert translator.HuggingFaceTranslator(device="cpu").translate_batch(["", "  "]) == ["", ""]
    model.generate.assert_not_called()


def test_generation_error_is_wrapped(hf_models):
    _, model = hf_models
    model.generate.side_effect = RuntimeError("boom")
    with pytest.raises(TranslationError):
        translator.HuggingFaceTranslator(device="cpu").translate("مرحبا")


def test_invalid_device(hf_models):
    with pytest.raises(ValueError):
        translator.HuggingFaceTranslator(device="tpu")
