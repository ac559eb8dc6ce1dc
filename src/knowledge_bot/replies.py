"""User-facing reply strings (Serbian, Latin script)."""

MISSING_CREDENTIAL = (
    "Potreban mi je OpenAI API ključ da bih radio. "
    "Zamolite administratora da ga podesi u odeljku za otpremanje dokumenata."
)

NO_DOCUMENTS = (
    "Još uvek nemam dokumente u bazi znanja koji odgovaraju na ovo pitanje. "
    "Zamolite administratora da otpremi dokumente kako bih mogao da odgovaram na osnovu njihovog sadržaja."
)

INVALID_CREDENTIAL = (
    "Izgleda da postoji problem sa OpenAI API ključem. "
    "Proverite da li je ispravan i da li ima dovoljno kredita."
)

EMPTY_COMPLETION = "Nisam uspeo da generišem odgovor. Pokušajte ponovo."

UNEXPECTED_ERROR = "Izvinite, došlo je do neočekivane greške. Pokušajte ponovo."


def generation_failed(detail: str) -> str:
    return f"Izvinite, došlo je do greške: {detail}"
