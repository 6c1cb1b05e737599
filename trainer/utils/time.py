def to_epoch_ms(dt):
    return int(dt.timestamp() * 1000)
