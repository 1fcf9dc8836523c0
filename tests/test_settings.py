from onnx_predictor.settings import Settings


def test_defaults():
    s = Settings.from_env({})
    assert s.model_url == "model.onnx"
    assert (s.input_name, s.output_name) == ("input", "output")
    assert s.feature_names == ()
    assert s.feature_count == 0
    assert s.csv_lenient is True


def test_from_env():
    s = Settings.from_env({
        "MODEL_URL": "artifacts/gbm.onnx",
        "INPUT_NAME": "X",
        "OUTPUT_NAME": "yhat",
        "FEATURE_NAMES": " a, b ,,c",
        "FEATURE_COUNT": "4",
        "CSV_LENIENT": "no",
        "RUNNER": "Triton",
        "TRITON_MODEL": "gbm",
    })
    assert s.feature_names == ("a", "b", "c")
    assert s.feature_count == 4
    assert s.csv_lenient is False
    assert s.runner == "triton"
    assert s.triton_infer_url == "http://triton:8000/v2/models/gbm/versions/1/infer"
