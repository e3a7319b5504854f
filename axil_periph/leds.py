from amaranth import *

class LEDDriver(Elaboratable):
    """LED output stage.

    Drives num_leds LEDs from the low bits of ctrl_in. Without dimming, the
    LED outputs are ctrl_in registered once. With dimming, the registered
    outputs are additionally gated by a PWM comparator: a free-running
    pwm_bits counter, LEDs on while the counter is below duty.
    """
    def __init__(self, num_leds=4, dimming=False, duty=128, pwm_bits=8):
        if num_leds < 1:
            raise ValueError("Need at least one LED, not {}".format(num_leds))
        if num_leds > 32:
            raise ValueError("At most 32 LEDs can be driven from the control register, not {}".format(num_leds))
        if dimming and not (0 <= duty <= 2**pwm_bits):
            raise ValueError("Duty cycle must be between 0 and {}, not {}".format(2**pwm_bits, duty))

        self.num_leds = num_leds
        self.dimming = dimming
        self.duty = duty
        self.pwm_bits = pwm_bits

        self.ctrl_in = Signal(32)
        self.leds = Signal(num_leds)

    def elaborate(self, platform):
        m = Module()

        if not self.dimming:
            m.d.sync += self.leds.eq(self.ctrl_in[0:self.num_leds])
        else:
            pwm_cnt = Signal(self.pwm_bits)
            m.d.sync += pwm_cnt.eq(pwm_cnt + 1)

            with m.If(pwm_cnt < self.duty):
                m.d.sync += self.leds.eq(self.ctrl_in[0:self.num_leds])
            with m.Else():
                m.d.sync += self.leds.eq(0)

        return m
