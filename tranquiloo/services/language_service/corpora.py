"""Reference corpora for the trigram language models.

Both samples cover the register the classifier actually sees: people
describing worries, family, work, therapy and small steps forward in
full sentences. Keep the two texts roughly the same length so neither
model is favoured by sheer volume.
"""

ENGLISH_CORPUS = """
People often describe their thoughts, plans and emotions in detailed paragraphs.
In everyday conversations we talk about family, relationships, therapy sessions,
achievements, fears and the wish to feel calmer.
Supportive statements such as you are doing your best or we can work through
this together appear frequently in the chats we read.
When people ask for help they may explain what happened in the past, what is
happening right now and what they hope will improve in the future.
I have been feeling anxious about work lately and my boss keeps adding deadlines.
My heart was racing before the meeting and I could not stop thinking about it.
Sometimes I worry that my friends are tired of listening to me.
Last night I could not sleep because my mind kept going over the same problems.
My partner and I had an argument and now the house feels very quiet.
I would like to learn a breathing exercise that helps when the panic starts.
The doctor said the symptoms should get better if I keep going to therapy.
Thank you for listening, talking about this with someone already helps a little.
"""

SPANISH_CORPUS = """
Muchas personas describen sus emociones, planes y dificultades usando párrafos
completos.
En conversaciones cotidianas hablamos de la familia, las relaciones, las sesiones
de terapia, los logros, los miedos y el deseo de sentirnos más tranquilos.
Las frases de apoyo como estás haciendo lo mejor posible o podemos trabajar en
esto juntos aparecen con frecuencia en los chats que leemos.
Cuando alguien pide ayuda puede explicar lo que ocurrió en el pasado, lo que
sucede ahora y lo que espera mejorar en el futuro.
Últimamente me siento ansiosa por el trabajo y mi jefe sigue poniendo plazos.
El corazón me latía muy rápido antes de la reunión y no podía dejar de pensar.
A veces me preocupa que mis amigos estén cansados de escucharme.
Anoche no pude dormir porque mi mente repetía los mismos problemas una y otra vez.
Mi pareja y yo discutimos y ahora la casa se siente muy callada.
Quisiera aprender un ejercicio de respiración que me ayude cuando empieza el pánico.
El médico dijo que los síntomas deberían mejorar si sigo yendo a terapia.
Gracias por escucharme, hablar de esto con alguien ya me ayuda un poco.
"""
