"""Row models, validation, input reading and image output."""
